from app.config.settings import Settings
from app.imaging.base import BaseImageCodec
from app.imaging.pillow_adapter import PillowCodecAdapter


class ImageCodecFactory:
    """Creates the image codec named in settings."""

    ADAPTERS: dict[str, type[BaseImageCodec]] = {
        "pillow": PillowCodecAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseImageCodec:
        codec = settings.image_codec.lower()
        adapter_cls = cls.ADAPTERS.get(codec)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown image codec '{codec}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
