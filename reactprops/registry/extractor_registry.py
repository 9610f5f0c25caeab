from reactprops.extractors.react_extractor import ReactComponentExtractor


def get_extractor(language: str, config=None):
    lang = language.lower()
    if lang in ("typescript", "tsx"):
        return ReactComponentExtractor(config)
    if lang in ("javascript", "jsx"):
        return ReactComponentExtractor(config)
    raise ValueError(f"No extractor for language: {language}")
