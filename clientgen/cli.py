import logging
import traceback
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from clientgen.codegen import Codegen
from clientgen.codemodel import CodeModelLoader
from clientgen.config import GeneratorSettings, get_config
from clientgen.exceptions import ClientGenError

console = Console()
app = typer.Typer(
    name='clientgen',
    help='Generate Python client libraries from code model documents',
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Log generation stages and details')
    ] = False,
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(message)s',
            handlers=[RichHandler(console=console, show_path=False)],
        )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
) -> None:
    """Generate client libraries from configuration.

    If no config file is specified, looks for clientgen.yaml, clientgen.yml
    or a [tool.clientgen] table in pyproject.toml in the current directory.

    Examples:
        clientgen generate
        clientgen generate --config widgets.yaml
    """
    try:
        generation_config = get_config(config)

        for document_config in generation_config.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating code for {document_config.source} in {document_config.output}...',
                    total=None,
                )

                codegen = Codegen.from_config(
                    document_config, write_files=generation_config.write_files
                )
                files = codegen.generate()

                progress.update(
                    task, description=f'Code generation completed for {document_config.source}!'
                )

            console.print(
                f'[green]Successfully generated {len(files)} files[/green] '
                f'in {document_config.output}'
            )
            for generated in files:
                console.print(f'  [dim]- {generated.path}[/dim]')

    except ClientGenError as e:
        console.print(f'[red]Error:[/red] {e}')
        raise typer.Exit(1)
    except Exception as e:
        console.print(f'[red]Error:[/red] {str(e)}')
        traceback.print_exc()
        raise typer.Exit(1)


@app.command()
def validate(
    source: Annotated[str, typer.Argument(help='Path or URL of a code model document')],
    namespace: Annotated[
        str | None,
        typer.Option('--namespace', '-n', help='Root package, when the document sets none'),
    ] = None,
) -> None:
    """Load a code model, run the generator in memory and list what it produces."""
    try:
        code_model = CodeModelLoader().load(source)
        settings = GeneratorSettings(namespace=namespace) if namespace else None
        codegen = Codegen(code_model, settings, source=source)
        files = codegen.generate()
    except ClientGenError as e:
        console.print(f'[red]Invalid:[/red] {e}')
        raise typer.Exit(1)

    table = Table(title=f'{source}')
    table.add_column('Kind', style='cyan')
    table.add_column('Name')
    table.add_column('Package', style='dim')
    for client in codegen.tree.top_down():
        table.add_row('client', client.class_name, client.class_type.package)
        for method_group in client.method_group_clients:
            table.add_row('operations', method_group.class_name, method_group.class_type.package)
    for enum_type in codegen.registry.enums():
        table.add_row('enum', enum_type.name, enum_type.package)
    for model in codegen.registry.models():
        table.add_row('model', model.name, model.package)

    console.print(table)
    console.print(f'[green]Valid:[/green] {len(files)} files would be generated')


@app.command()
def version() -> None:
    """Show the version of clientgen."""
    try:
        console.print(f'clientgen version: {package_version("clientgen")}')
    except PackageNotFoundError:
        console.print('clientgen version: unknown')


if __name__ == '__main__':
    app()
