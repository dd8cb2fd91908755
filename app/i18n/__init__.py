from .core import LANGUAGES, load_lang, t, translate

__all__ = ["LANGUAGES", "load_lang", "t", "translate"]
