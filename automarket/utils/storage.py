from pathlib import Path
from automarket.core.config import settings


class Storage:
    def __init__(self, media_root: str = settings.media_root, media_url: str = settings.media_url):
        self.media_root = Path(media_root)
        self.media_url = media_url.rstrip('/')
        self.media_root.mkdir(parents=True, exist_ok=True)

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        """Write a blob under the media root and return its public url"""
        file_path = self.media_root / path.lstrip('/')
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("wb") as f:
            f.write(data)
        return f"{self.media_url}/{path.lstrip('/')}"

    def delete(self, urls: list[str]) -> None:
        for url in urls:
            relative_path = url.replace(self.media_url, "", 1)
            file_path = self.media_root / relative_path.lstrip("/")
            if file_path.exists():
                file_path.unlink()


storage = Storage()
