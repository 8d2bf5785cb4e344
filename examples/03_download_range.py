"""
Read byte ranges of a chunked video
"""
import asyncio
import sys
from taisdk import TaiClient


async def main(manifest_id: str):
    async with TaiClient() as tai:
        manifest = await tai.download_manifest(manifest_id)
        print(f"{manifest.title}: {manifest.total_size:,} bytes in {manifest.chunk_count} chunks")

        # First megabyte, e.g. for the container header
        head = await tai.download_range(manifest, 0, 1024 * 1024)
        print(f"Header: {len(head.data):,} bytes from {head.chunks_used} chunk(s)")

        # Only the chunks covering the range are fetched
        middle = manifest.total_size // 2
        part = await tai.download_range(manifest, middle, middle + 2 * 1024 * 1024)
        print(f"Middle: {len(part.data):,} bytes from {part.chunks_used} chunk(s)")

        # Whole file
        data = await tai.download_video(manifest)
        with open(f"{manifest.title}.bin", "wb") as f:
            f.write(data)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1]))
