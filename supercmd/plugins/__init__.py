"""
Plugins -- Discovery and invocation of external "<prefix><name>" executables
"""

from .plugins import DESCRIPTION_FLAG, PluginCommand, Plugins

__all__ = ['DESCRIPTION_FLAG', 'PluginCommand', 'Plugins']
