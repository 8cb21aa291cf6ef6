"""
Workflow Service CLI
"""
import asyncio
import sys
from pathlib import Path

import click

from .config import Settings, configure_logging
from .core import WorkflowEngine, DefinitionParser
from .exceptions import DefinitionParseError, WorkflowServiceError
from .storage.repository import InMemoryWorkflowStore


def _load_definition(workflow_file: str):
    """解析定义文件，失败时退出"""
    try:
        return DefinitionParser().parse_file(Path(workflow_file))
    except DefinitionParseError as e:
        click.echo(f"Failed to parse {workflow_file}: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option('--log-level', default=None, help='Logging level (default: LOG_LEVEL or INFO)')
@click.pass_context
def cli(ctx, log_level):
    """Workflow Service CLI"""
    settings = Settings.from_env()
    if log_level:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level)
    ctx.obj = settings


@cli.command()
@click.option('--host', default=None, help='Host to bind to')
@click.option('--port', default=None, type=int, help='Port to bind to')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
@click.pass_obj
def serve(settings, host, port, reload):
    """Start the API server"""
    import uvicorn

    host = host or settings.host
    port = port or settings.port
    reload = reload or settings.reload

    click.echo(f"Starting API server on {host}:{port}")
    uvicorn.run(
        "workflow_service.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=None if reload else settings.workers,
        log_level=settings.log_level.lower()
    )


@cli.command()
@click.argument('workflow_file', type=click.Path(exists=True, dir_okay=False))
def validate(workflow_file):
    """Validate a workflow definition file"""
    definition = _load_definition(workflow_file)
    engine = WorkflowEngine(store=InMemoryWorkflowStore())

    result = asyncio.run(engine.create_and_validate_definition(definition))
    if not result.ok:
        click.echo(f"Invalid workflow '{definition.id}': {result.error.message}", err=True)
        sys.exit(1)

    click.echo(
        f"Workflow '{definition.id}' is valid "
        f"({len(definition.states)} states, {len(definition.actions)} actions)"
    )


@cli.command()
@click.argument('workflow_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--action', '-a', 'actions', multiple=True, help='Action to execute (repeatable)')
def simulate(workflow_file, actions):
    """Start an instance and execute actions in order"""
    definition = _load_definition(workflow_file)

    async def _simulate():
        engine = WorkflowEngine(store=InMemoryWorkflowStore())
        (await engine.create_and_validate_definition(definition)).unwrap()
        instance = (await engine.start_instance(definition.id)).unwrap()
        click.echo(f"Started instance {instance.id} in state '{instance.current_state_id}'")

        for action_id in actions:
            previous = instance.current_state_id
            instance = (await engine.execute_action(instance.id, action_id)).unwrap()
            click.echo(f"{action_id}: {previous} -> {instance.current_state_id}")

        available = (await engine.available_actions(instance.id)).unwrap()
        instance = available.instance
        click.echo(
            f"Final state: '{instance.current_state_id}' "
            f"(history: {len(instance.history)}, "
            f"available actions: {', '.join(a.id for a in available.actions) or 'none'})"
        )

    try:
        asyncio.run(_simulate())
    except WorkflowServiceError as e:
        click.echo(f"Error [{e.kind.value}]: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
