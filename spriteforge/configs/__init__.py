"""Render configuration (render.yaml) and bundled example sprites."""

from .loader import ConfigError, RenderConfig, load_config

__all__ = ['ConfigError', 'RenderConfig', 'load_config']
