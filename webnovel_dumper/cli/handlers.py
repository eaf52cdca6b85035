import sys
import click
from typing import Optional, Dict, Any, Union

from webnovel_dumper.core.orchestrator import download_novel as call_orchestrator_download_novel
from webnovel_dumper.exceptions import DumperError, InitError, WriteError
from .contexts import DumpNovelContext
from webnovel_dumper.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_COLORS = {
    "success": "green",
    "warning": "yellow",
    "error": "red",
}

def display_progress(message: Union[str, Dict[str, Any]]) -> None:
    if isinstance(message, dict):
        status = message.get("status", "info")
        msg = message.get("message", "No message content.")
        color = STATUS_COLORS.get(status)
        click.echo(click.style(msg, fg=color) if color else msg, err=status == "error")
    else:
        click.echo(str(message))

def dump_novel_handler(
    novel_id: str,
    retry_delay: Optional[float],
    output_dir: Optional[str],
):
    context = DumpNovelContext(
        novel_id=novel_id,
        retry_delay=retry_delay,
        output_dir=output_dir,
    )

    if not context.is_valid():
        for msg in context.error_messages:
            click.echo(click.style(msg, fg="red"), err=True)
        logger.error(f"DumpNovelContext validation failed. Errors: {context.error_messages}")
        sys.exit(1)

    # Warnings collected while resolving settings
    for msg in context.error_messages:
        click.echo(click.style(msg, fg="yellow"), err=True)

    logger.info(f"CLI handler initiated dump of '{context.novel_id}' into {context.output_dir} (retry delay {context.retry_delay}s)")

    try:
        summary = call_orchestrator_download_novel(
            **context.get_orchestrator_kwargs(),
            progress_callback=display_progress
        )
    except InitError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        logger.error(f"Could not open chapter list for '{context.novel_id}': {e}")
        sys.exit(1)
    except WriteError as e:
        click.echo(click.style(f"Error: {e}. Aborting.", fg="red"), err=True)
        logger.error(f"Dump of '{context.novel_id}' aborted: {e}")
        sys.exit(1)
    except DumperError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        logger.error(f"Dump of '{context.novel_id}' failed: {e}", exc_info=True)
        sys.exit(1)

    click.echo(click.style("✓ Download completed successfully!", fg="green"))
    click.echo(f"  Title: {summary['title']}")
    click.echo(f"  Chapters written: {summary['chapters_written']}")
    if summary['retries']:
        click.echo(f"  Retries needed: {summary['retries']}")
    click.echo(f"  Output: {summary['output_path']}")
    logger.info(
        f"Successfully dumped '{summary['title']}' ({summary['chapters_written']} chapters) to {summary['output_path']}"
    )
