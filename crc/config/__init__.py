from crc.config.settings import Settings

__all__ = ["Settings"]
