
class FormatError(ValueError):
    pass


class ConfigError(ValueError):
    pass


class ImageIOError(OSError):
    pass
