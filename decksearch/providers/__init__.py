"""
External text-understanding providers.

The Gemini provider is lazily imported so that a missing SDK (e.g.
google-genai) does not break local search, which never touches it.
"""
from .base import GenerationResult, LLMProvider

__all__ = [
    "GenerationResult",
    "LLMProvider",
    "GeminiLLMProvider",
]

# Lazy import map: attribute name -> (module, real_name)
_LAZY_IMPORTS = {
    "GeminiLLMProvider": (".gemini", "GeminiLLMProvider"),
}


def __getattr__(name: str):
    if name in _LAZY_IMPORTS:
        module_path, real_name = _LAZY_IMPORTS[name]
        import importlib
        mod = importlib.import_module(module_path, __package__)
        attr = getattr(mod, real_name)
        # Cache on the module so __getattr__ isn't called again
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
