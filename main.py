#!/usr/bin/env python3
"""
Story to Tests - test case generation backend with Jira story import

Serve the REST API consumed by the test generation UI, or inspect the
configured Jira project and generate test cases from the command line.
"""

import click
import logging
import os
import sys

from src.config import Config
from src.exceptions import JiraError, GenerationError
from src.jira_client import JiraClient
from src.jira_session import JiraSession, JiraTransport
from src.llm_client import LLMClient
from src.models import StorySummary
from src.test_generator import StoryTestGenerator


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.addHandler(console_handler)

    # Reduce noise from external libraries
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def connect_from_config(config: Config) -> JiraClient:
    """Connect to the Jira instance configured in the `jira` section"""
    if not config.has_jira_credentials():
        click.echo("Missing Jira configuration: server_url, username and api_token are required", err=True)
        sys.exit(1)

    session = JiraSession(JiraTransport(timeout=config.get_request_timeout()))
    if not session.connect(config.jira['server_url'], config.jira['username'], config.jira['api_token']):
        click.echo("❌ Jira connection failed - check credentials", err=True)
        sys.exit(1)

    return JiraClient(
        session=session,
        acceptance_criteria_field=config.get_acceptance_criteria_field(),
        story_jql=config.get_story_jql(),
        max_results=config.get_max_results()
    )


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """Story to Tests - test case generation with Jira story import"""
    setup_logging(verbose)

    # Load configuration
    try:
        config_obj = Config(config)
        if not config_obj.validate():
            sys.exit(1)
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    ctx.obj = config_obj


@cli.command()
@click.option('--host', default=None, help='Bind address (defaults to server.host)')
@click.option('--port', default=None, type=int, help='Port (defaults to server.port)')
@click.option('--reload', is_flag=True, help='Reload on code changes')
@click.pass_context
def serve(ctx, host, port, reload):
    """Run the REST API"""
    import uvicorn

    config = ctx.obj
    os.environ['CONFIG_PATH'] = config.config_path
    uvicorn.run(
        "api.main:app",
        host=host or config.server.get('host') or '0.0.0.0',
        port=port or int(config.server.get('port') or 8080),
        reload=reload,
        log_level="info"
    )


@cli.command()
@click.pass_context
def check(ctx):
    """Test the configured Jira connection"""
    jira_client = connect_from_config(ctx.obj)
    info = jira_client.session.get_connection_info()
    click.echo(f"✅ Connected to {info['baseUrl']} as {info['email']}")


@cli.command()
@click.pass_context
def stories(ctx):
    """List the most recently updated stories"""
    jira_client = connect_from_config(ctx.obj)
    try:
        issues = jira_client.get_stories()
    except JiraError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    summaries = [StorySummary.from_issue(issue) for issue in issues if isinstance(issue, dict)]
    for summary in summaries:
        click.echo(f"{summary.key}\t{summary.issueType}\t{summary.title}")
    click.echo(f"\n{len(summaries)} stories")


@cli.command()
@click.argument('story_key')
@click.pass_context
def story(ctx, story_key):
    """Show title, description and acceptance criteria of a story"""
    jira_client = connect_from_config(ctx.obj)
    try:
        detail = jira_client.get_story_details(story_key)
    except JiraError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"{detail.key}: {detail.title}")
    click.echo("\nDescription:")
    click.echo(detail.description or "(none)")
    click.echo("\nAcceptance Criteria:")
    click.echo(detail.acceptanceCriteria or "(none)")


@cli.command()
@click.argument('story_key')
@click.option('--info', default=None, help='Additional context for the generator')
@click.pass_context
def generate(ctx, story_key, info):
    """Generate test cases for a story"""
    config = ctx.obj
    if not config.has_llm_credentials():
        click.echo(f"Missing API key for LLM provider: {config.get_llm_provider()}", err=True)
        sys.exit(1)

    jira_client = connect_from_config(config)
    try:
        detail = jira_client.get_story_details(story_key)
        if not detail.acceptanceCriteria:
            click.echo(f"❌ {story_key} has no acceptance criteria", err=True)
            sys.exit(1)

        generator = StoryTestGenerator(LLMClient(config.get_llm_config()))
        result = generator.generate(
            story_title=detail.title,
            acceptance_criteria=detail.acceptanceCriteria,
            description=detail.description,
            additional_info=info
        )
    except (JiraError, GenerationError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    for case in result.cases:
        click.echo(f"\n{case.id} [{case.category}] {case.title}")
        for number, step in enumerate(case.steps, 1):
            click.echo(f"  {number}. {step}")
        if case.testData:
            click.echo(f"  Test data: {case.testData}")
        click.echo(f"  Expected: {case.expectedResult}")

    click.echo(f"\n{len(result.cases)} test cases ({result.model}, {result.promptTokens} prompt / {result.completionTokens} completion tokens)")


if __name__ == '__main__':
    cli()
