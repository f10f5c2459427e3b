__all__ = ["Provider"]


class Provider:
    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass
