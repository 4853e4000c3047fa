# asf_core/models/__init__.py
"""
Shared enumerations for asf_core.

Model Organization:
    - enums.py: Closed vocabularies (OverrideType, ScriptSection)

Subtitle data classes live in asf_core.subtitles.data.
"""

from .enums import OverrideType, ScriptSection

__all__ = ['OverrideType', 'ScriptSection']
