"""
Upload a video in chunks
"""
import asyncio
from pathlib import Path
from taisdk import TaiClient, UploadVideoConfig


async def main():
    async with TaiClient() as tai:

        # Log retries of individual requests
        tai.on('retry', lambda info: print(f"Retry {info.attempt}/{info.max_retries}: {info.error}"))

        def on_progress(progress):
            print(f"Chunk {progress.chunk_index + 1}/{progress.total_chunks}: {progress.bytes_uploaded:,} bytes")

        result = await tai.upload_video(Path("movie.mp4"), UploadVideoConfig(
            title="My movie",
            duration_ms=95_000,
            concurrency=4,
            on_progress=on_progress
        ))
        print(f"Manifest: {result.blob_id}")
        print(f"URL: {result.url}")

        # Encrypted upload; keep the key, it is not stored anywhere
        result = await tai.upload_video(Path("private.mp4"), UploadVideoConfig(
            title="Private",
            encrypt=True
        ))
        print(f"Manifest: {result.blob_id}")
        print(f"Key: {result.encryption_key.hex()}")


if __name__ == "__main__":
    asyncio.run(main())
