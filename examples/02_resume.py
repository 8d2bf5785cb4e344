"""
Resume an interrupted upload
"""
import asyncio
from pathlib import Path
from taisdk import TaiClient, UploadVideoConfig, ChunkTransferError


async def main():
    config = UploadVideoConfig(title="Long recording", chunk_size=8 * 1024 * 1024, encrypt=True)

    async with TaiClient() as tai:
        for attempt in range(1, 4):
            try:
                result = await tai.upload_video(Path("recording.mkv"), config)
                break
            except ChunkTransferError as e:
                print(f"Attempt {attempt} failed at chunk {e.chunk_index}: {len(e.uploaded_chunks)} chunks kept")
                # Only the missing chunks are sent next time
                config.existing_chunks = e.uploaded_chunks
                # Resumed chunks were encrypted with this key
                config.encryption_key = e.encryption_key
        else:
            print("Giving up")
            return

        print(f"Manifest: {result.blob_id}")
        print(f"Key: {result.encryption_key.hex()}")


if __name__ == "__main__":
    asyncio.run(main())
