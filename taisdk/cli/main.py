"""Tai CLI - Main commands."""
import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

app = typer.Typer(
    name="tai",
    help="Chunked video storage on Walrus",
    add_completion=False
)
console = Console()

state = {'network': 'testnet'}


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def make_client():
    from taisdk import TaiClient
    return TaiClient(TaiClient.create_config(network=state['network']))


def parse_key(key_hex: Optional[str]) -> Optional[bytes]:
    """Decode a hex key given on the command line."""
    if key_hex is None:
        return None
    try:
        return bytes.fromhex(key_hex)
    except ValueError:
        console.print("[red]Key must be hex encoded[/red]")
        raise typer.Exit(1)


def resume_path_for(file: Path) -> Path:
    return file.with_name(file.name + ".tai-resume.json")


def save_resume(path: Path, chunks, encryption_key: Optional[bytes] = None) -> None:
    """Write the chunks of a failed upload and the key they were encrypted with."""
    path.write_text(json.dumps({
        'encryptionKey': encryption_key.hex() if encryption_key else None,
        'chunks': [chunk.to_dict() for chunk in chunks],
    }, indent=2))


def load_resume(path: Path):
    """Return (chunks, key) from a resume file; a bare chunk list has no key."""
    from taisdk import ChunkRecord
    data = json.loads(path.read_text())
    if isinstance(data, list):
        data = {'chunks': data}
    key_hex = data.get('encryptionKey')
    chunks = [ChunkRecord.from_dict(item) for item in data.get('chunks', [])]
    return chunks, bytes.fromhex(key_hex) if key_hex else None


@app.callback()
def main(
    network: str = typer.Option("testnet", "--network", "-n", envvar="TAI_NETWORK", help="testnet or mainnet"),
):
    """Tai network command line."""
    state['network'] = network


@app.command()
def upload(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to upload"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Title (defaults to file name)"),
    mime_type: Optional[str] = typer.Option(None, "--mime-type", help="Media type"),
    duration_ms: int = typer.Option(0, "--duration-ms", help="Media duration in milliseconds"),
    chunk_size: int = typer.Option(10 * 1024 * 1024, "--chunk-size", help="Bytes per chunk"),
    concurrency: int = typer.Option(3, "--concurrency", "-c", help="Parallel chunk uploads"),
    encrypt: bool = typer.Option(False, "--encrypt", help="Encrypt chunks with AES-256-GCM"),
    key: Optional[str] = typer.Option(None, "--key", help="Hex encoded 32-byte key"),
    resume: Optional[Path] = typer.Option(None, "--resume", help="Resume file from a failed upload"),
):
    """Upload a file in chunks and print the manifest id."""
    from taisdk import UploadVideoConfig, ChunkTransferError, ManifestTransferError, TaiException

    existing, saved_key = load_resume(resume) if resume else ([], None)
    encryption_key = parse_key(key)
    if saved_key and encryption_key and saved_key != encryption_key:
        console.print("[red]--key differs from the key stored in the resume file[/red]")
        raise typer.Exit(1)
    # Resumed chunks are only readable under the key they were written with
    encryption_key = encryption_key or saved_key

    async def do_upload():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task(f"Uploading {file.name}", total=file.stat().st_size)
            options = UploadVideoConfig(
                title=title or file.name,
                mime_type=mime_type,
                duration_ms=duration_ms,
                chunk_size=chunk_size,
                concurrency=concurrency,
                encrypt=encrypt,
                encryption_key=encryption_key,
                existing_chunks=existing,
                on_progress=lambda p: progress.update(task, completed=p.bytes_uploaded)
            )
            async with make_client() as tai:
                return await tai.upload_video(file, options)

    try:
        result = run_async(do_upload())
    except (ChunkTransferError, ManifestTransferError) as e:
        resume_file = resume_path_for(file)
        save_resume(resume_file, e.uploaded_chunks, e.encryption_key)
        console.print(f"[red]Upload failed: {e}[/red]")
        console.print(f"{len(e.uploaded_chunks)} chunks saved to {resume_file}; retry with --resume")
        if e.encryption_key:
            console.print(f"Key: {e.encryption_key.hex()}")
        raise typer.Exit(1)
    except TaiException as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        raise typer.Exit(1)

    if resume:
        resume.unlink(missing_ok=True)

    console.print(f"[green]Manifest: {result.blob_id}[/green]")
    console.print(f"URL: {result.url}")
    if result.encryption_key:
        console.print(f"Key: {result.encryption_key.hex()}")


@app.command()
def download(
    manifest_id: str = typer.Argument(..., help="Manifest blob id"),
    output: Path = typer.Argument(..., help="Destination file"),
    start: int = typer.Option(0, "--start", help="First byte"),
    end: Optional[int] = typer.Option(None, "--end", help="End byte (exclusive)"),
    key: Optional[str] = typer.Option(None, "--key", help="Hex encoded key for encrypted uploads"),
):
    """Download a chunked object, or a byte range of it."""
    from taisdk import TaiException

    encryption_key = parse_key(key)

    async def do_download():
        async with make_client() as tai:
            manifest = await tai.download_manifest(manifest_id)
            stop = manifest.total_size if end is None else end
            return await tai.download_range(manifest, start, stop, encryption_key)

    try:
        result = run_async(do_download())
    except TaiException as e:
        console.print(f"[red]Download failed: {e}[/red]")
        raise typer.Exit(1)

    output.write_bytes(result.data)
    console.print(f"[green]{len(result.data):,} bytes from {result.chunks_used} chunks -> {output}[/green]")


@app.command()
def manifest(
    manifest_id: str = typer.Argument(..., help="Manifest blob id"),
):
    """Show a manifest."""
    from taisdk import TaiException

    async def fetch():
        async with make_client() as tai:
            return await tai.download_manifest(manifest_id)

    try:
        data = run_async(fetch())
    except TaiException as e:
        console.print(f"[red]Could not read manifest: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"Title: {data.title}")
    console.print(f"Type: {data.mime_type}")
    console.print(f"Size: {data.total_size:,} bytes")
    console.print(f"Duration: {data.duration_ms} ms")

    table = Table()
    table.add_column("Index", justify="right")
    table.add_column("Range")
    table.add_column("Size", justify="right")
    table.add_column("Blob", style="dim")
    for chunk in data.chunks:
        table.add_row(
            str(chunk.index),
            f"{chunk.offset_start}-{chunk.offset_end}",
            f"{chunk.size:,}",
            chunk.remote_id
        )
    console.print(table)


@app.command()
def exists(
    blob_id: str = typer.Argument(..., help="Blob id"),
):
    """Check whether a blob exists."""
    async def check():
        async with make_client() as tai:
            return await tai.blob_exists(blob_id)

    if run_async(check()):
        console.print("[green]exists[/green]")
    else:
        console.print("[yellow]not found[/yellow]")
        raise typer.Exit(1)


@app.command()
def url(
    blob_id: str = typer.Argument(..., help="Blob id"),
):
    """Print the aggregator URL of a blob."""
    console.print(make_client().get_url(blob_id))


if __name__ == "__main__":
    app()
