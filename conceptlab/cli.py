"""
Command-line interface for the conceptlab package.

This module provides the CLI commands for the conceptlab package:
- describe: Print the audience summary that is sent to the LLM
- generate: Generate a marketing concept for one or more audiences
- remix: Remix a stored concept into a variation
- serve: Run the HTTP API
"""

import os
import sys
import json
import click
from typing import Optional, Tuple

from conceptlab import __version__
from conceptlab.core.config import get_config_value, set_config_value
from conceptlab.core.logging_config import get_logger, configure_logging
from conceptlab.core.error_handler import ValidationError, ConfigurationError

# Initialize logging
configure_logging()
logger = get_logger(__name__)


def _load_owned_audience(audiences_file: str, audience_id: str, user: str):
    """
    Load an audience the user owns, or exit with the forbidden message.
    """
    from conceptlab.store.audience_store import JsonAudienceStore

    store = JsonAudienceStore(audiences_file)
    audience = store.get_audience(audience_id, user)
    if audience is None:
        logger.warning(f"User {user} cannot use audience {audience_id}")
        click.echo("Error: You can only use your own audiences", err=True)
        sys.exit(1)
    return audience


def _load_concept(concept: str, store, user: str):
    """
    Load a concept by stored id, or from a JSON file with title and description.

    Returns:
        Tuple of (GeneratedConcept, concept record)
    """
    from conceptlab.audience2concept.models import GeneratedConcept

    record = store.load_concept(concept, user_id=user)
    if record is not None:
        return GeneratedConcept.from_dict(record), record

    if os.path.isfile(concept):
        with open(concept, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict) or "title" not in data or "description" not in data:
            raise click.ClickException(f"{concept} must contain a title and a description")
        # A file written by this tool carries its own id and owner
        if data.get("user_id") not in (None, user):
            raise click.ClickException("You can only remix your own concepts")
        return GeneratedConcept.from_dict(data), data

    raise click.ClickException(f"Concept not found: {concept}")


def _snapshot_audiences(record: dict):
    """
    Rebuild the audiences a concept was saved with, primary first.
    """
    from conceptlab.audience2concept.models import Audience

    snapshots = record.get("audience_snapshots") or []
    if not isinstance(snapshots, list):
        return []
    return [
        Audience.from_dict(snapshot) for snapshot in snapshots
        if isinstance(snapshot, dict) and snapshot.get("id") and snapshot.get("name")
    ]


def _echo_record(record: dict, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(record, indent=2))
        return
    click.echo(f"\n{record['title']}\n")
    click.echo(record["description"])
    if record.get("id"):
        click.echo(f"\nSaved as concept {record['id']}")


@click.group()
@click.version_option(version=__version__)
def main():
    """
    conceptlab - AI marketing concepts for audience profiles.

    Generates marketing concepts targeted at structured audience profiles
    and remixes existing concepts into variations.
    """
    pass


@main.command()
@click.argument('audiences_file', type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True))
@click.argument('audience_id', type=str)
@click.option('-u', '--user', required=True, help='User id that owns the audience')
def describe(audiences_file: str, audience_id: str, user: str):
    """
    Print the audience description used in prompts.

    AUDIENCES_FILE: JSON file with audience records

    AUDIENCE_ID: Id of the audience to describe
    """
    from conceptlab.audience2concept.audience_description import build_audience_description

    try:
        audience = _load_owned_audience(audiences_file, audience_id, user)
    except (FileNotFoundError, ValueError, ValidationError, ConfigurationError) as e:
        logger.error(f"Error loading audiences: {str(e)}")
        click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)

    click.echo(build_audience_description(audience))


@main.command()
@click.argument('audiences_file', type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True))
@click.argument('audience_ids', nargs=-1, required=True)
@click.option('-u', '--user', required=True, help='User id that owns the audiences')
@click.option('-c', '--campaign-type', type=str, help='Campaign type (default: general marketing campaign)')
@click.option('-t', '--tone', type=str, help='Tone of voice (default: engaging and persuasive)')
@click.option('--context', 'additional_context', type=str, help='Additional context for the concept')
@click.option('-o', '--output-dir', type=click.Path(file_okay=False, dir_okay=True),
              help='Directory for saved concepts (default: storage.concepts_dir from config)')
@click.option('--model', type=str, help='LLM model to use (default: llm.model from config)')
@click.option('--log', 'log_file', type=click.Path(file_okay=True, dir_okay=False),
              help='Append LLM requests and responses to this file')
@click.option('--no-save', is_flag=True, default=False, help='Print the concept without saving it')
@click.option('--json', 'as_json', is_flag=True, default=False, help='Print the result as JSON')
def generate(audiences_file: str, audience_ids: Tuple[str, ...], user: str,
             campaign_type: Optional[str] = None, tone: Optional[str] = None,
             additional_context: Optional[str] = None, output_dir: Optional[str] = None,
             model: Optional[str] = None, log_file: Optional[str] = None,
             no_save: bool = False, as_json: bool = False):
    """
    Generate a marketing concept for one or more audiences.

    AUDIENCES_FILE: JSON file with audience records

    AUDIENCE_IDS: Ids of the target audiences. The first one is the primary
    audience; the others are named in the prompt context.

    Examples:
      conceptlab generate audiences.json aud-1 -u user-1
      conceptlab generate audiences.json aud-1 -u user-1 -c "product launch" -t playful
      conceptlab generate audiences.json aud-1 aud-2 -u user-1
    """
    from conceptlab.audience2concept.concept_service import create_concept_service, multi_audience_context
    from conceptlab.store.concept_store import JsonConceptStore

    try:
        # Keep the order given, drop repeats
        unique_ids = list(dict.fromkeys(audience_ids))
        audiences = [_load_owned_audience(audiences_file, audience_id, user) for audience_id in unique_ids]

        if model:
            set_config_value("llm.model", model, save=False)
            click.echo(f"Using LLM model: {model}")

        service = create_concept_service(log_file=log_file)
        # The first audience is described in full, the rest are named in the context
        concept = service.generate(
            audiences[0],
            campaign_type=campaign_type,
            tone=tone,
            additional_context=multi_audience_context(audiences, additional_context)
        )
        if concept.degraded:
            click.echo("Warning: the LLM request failed, showing a fallback concept", err=True)

        if no_save:
            record = concept.to_dict()
        else:
            store = JsonConceptStore(output_dir or get_config_value("storage.concepts_dir", "concepts"))
            record = store.save_concept(concept, audiences, user)

        _echo_record(record, as_json)

    except (FileNotFoundError, ValueError, ValidationError, ConfigurationError, IOError) as e:
        logger.error(f"Error generating concept: {str(e)}")
        click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)


@main.command()
@click.argument('audiences_file', type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True))
@click.argument('audience_id', type=str, required=False)
@click.option('-u', '--user', required=True, help='User id that owns the audience')
@click.option('--concept', 'concept_ref', required=True,
              help='Id of a saved concept, or a JSON file with title and description')
@click.option('-i', '--instructions', type=str,
              help='Remix instructions (default: Create a variation with a fresh perspective)')
@click.option('-o', '--output-dir', type=click.Path(file_okay=False, dir_okay=True),
              help='Directory for saved concepts (default: storage.concepts_dir from config)')
@click.option('--model', type=str, help='LLM model to use (default: llm.model from config)')
@click.option('--log', 'log_file', type=click.Path(file_okay=True, dir_okay=False),
              help='Append LLM requests and responses to this file')
@click.option('--no-save', is_flag=True, default=False, help='Print the remix without saving it')
@click.option('--json', 'as_json', is_flag=True, default=False, help='Print the result as JSON')
def remix(audiences_file: str, user: str, concept_ref: str, audience_id: Optional[str] = None,
          instructions: Optional[str] = None, output_dir: Optional[str] = None,
          model: Optional[str] = None, log_file: Optional[str] = None,
          no_save: bool = False, as_json: bool = False):
    """
    Remix an existing concept into a variation.

    AUDIENCES_FILE: JSON file with audience records

    AUDIENCE_ID: Id of the target audience. Defaults to the primary audience
    the concept was saved with; the remix keeps all of its audiences.

    Examples:
      conceptlab remix audiences.json -u user-1 --concept 3f2c...
      conceptlab remix audiences.json aud-1 -u user-1 --concept concept.json -i "make it seasonal"
    """
    from conceptlab.audience2concept.concept_service import create_concept_service
    from conceptlab.store.concept_store import JsonConceptStore

    try:
        store = JsonConceptStore(output_dir or get_config_value("storage.concepts_dir", "concepts"))
        original, original_record = _load_concept(concept_ref, store, user)

        if audience_id:
            audiences = [_load_owned_audience(audiences_file, audience_id, user)]
        else:
            audiences = _snapshot_audiences(original_record)
            if not audiences and original_record.get("audience_id"):
                audiences = [_load_owned_audience(audiences_file, original_record["audience_id"], user)]
        if not audiences:
            raise click.ClickException(
                "Unable to find audience data for remixing. The original audience may have been deleted."
            )
        if audiences[0].user_id not in (None, user):
            logger.warning(f"User {user} cannot use audience {audiences[0].id}")
            click.echo("Error: You can only use your own audiences", err=True)
            sys.exit(1)

        if model:
            set_config_value("llm.model", model, save=False)
            click.echo(f"Using LLM model: {model}")

        service = create_concept_service(log_file=log_file)
        concept = service.remix(original, audiences[0], remix_instructions=instructions)
        if concept.degraded:
            click.echo("Warning: the LLM request failed, showing a fallback remix", err=True)

        if no_save:
            record = concept.to_dict()
        else:
            record = store.save_concept(
                concept, audiences, user, source_concept_id=original_record.get("id")
            )

        _echo_record(record, as_json)

    except (FileNotFoundError, ValueError, ValidationError, ConfigurationError, IOError) as e:
        logger.error(f"Error remixing concept: {str(e)}")
        click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)


@main.command()
@click.option('--host', type=str, help='Bind address (default: server.host from config)')
@click.option('--port', type=int, help='Port (default: server.port from config)')
@click.option('--audiences', 'audiences_file', type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
              help='JSON file with audience records (default: storage.audiences_file from config)')
@click.option('--log', 'log_file', type=click.Path(file_okay=True, dir_okay=False),
              help='Append LLM requests and responses to this file')
def serve(host: Optional[str] = None, port: Optional[int] = None,
          audiences_file: Optional[str] = None, log_file: Optional[str] = None):
    """
    Run the concept generation HTTP API.
    """
    import uvicorn
    from conceptlab.core.constants import DEFAULT_SERVER_HOST, DEFAULT_SERVER_PORT
    from conceptlab.server import create_app, build_default_handler

    try:
        handler = build_default_handler(audiences_file=audiences_file, log_file=log_file)
    except (FileNotFoundError, ValueError, ValidationError, ConfigurationError) as e:
        logger.error(f"Error starting server: {str(e)}")
        click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)

    host = host or get_config_value("server.host", DEFAULT_SERVER_HOST)
    port = port or get_config_value("server.port", DEFAULT_SERVER_PORT)
    click.echo(f"Serving conceptlab API on http://{host}:{port}")
    uvicorn.run(create_app(handler), host=host, port=port)


if __name__ == '__main__':
    main()
