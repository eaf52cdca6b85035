import click
from typing import Optional
from webnovel_dumper.cli.handlers import dump_novel_handler

@click.command()
@click.argument('novel_id')
@click.option('--retry-delay', default=None, type=click.FloatRange(min=0), help='Delay in seconds before downloading a chapter again after a network error. Defaults to 2 seconds (or the value in settings.ini).')
@click.option('--output-dir', default=None, type=click.Path(file_okay=False), help='Directory to write the Markdown file to. Defaults to the current directory.')
def dumper(novel_id: str, retry_delay: Optional[float], output_dir: Optional[str]):
    """Downloads the text of a webnovelpub novel into a Markdown file.

    NOVEL_ID is the id of the novel to dump (e.g. the-novels-extra-07082217).
    """
    dump_novel_handler(
        novel_id=novel_id,
        retry_delay=retry_delay,
        output_dir=output_dir,
    )

if __name__ == '__main__':
    dumper()
