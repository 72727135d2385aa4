import json
import logging
import sys

import click

import beyonder.logic.beyonder as beyonder_
import beyonder.logic.clusters as clusters_
from beyonder.environment import Environment
from beyonder.models.resource import ProvisionOutcome

logger = logging.getLogger(__name__)

TEMPLATE_KINDS = {
    "legacy": beyonder_.create_template,
    "index": beyonder_.create_index_template,
    "component": beyonder_.create_component_template,
}

# ################### UNIVERSAL ####################


class Context(object):
    def __init__(self, config_file, endpoint=None) -> None:
        self.config_file = config_file
        try:
            if endpoint:
                self.env = Environment(config={"cluster": {"endpoint": endpoint, "no_auth": None}})
            else:
                self.env = Environment(config_file=config_file)
        except Exception as e:
            raise click.ClickException(str(e))
        self.json = False

    def root(self, root_override):
        return root_override if root_override else self.env.root

    def force(self, force_flag):
        return force_flag or self.env.force


def echo_outcome(ctx: Context, label: str, outcome: ProvisionOutcome):
    if ctx.json:
        click.echo(json.dumps({label: outcome.value}))
    else:
        click.echo(f"{label}: {outcome.value}")


root_option = click.option("--root", default=None,
                           help="Directory holding the definition files. Defaults to the configured root.")
force_option = click.option("--force", is_flag=True, default=False,
                            help="Delete and recreate definitions that already exist")


@click.group()
@click.option("--config-file", default="beyonder.yaml", help="Path to config file")
@click.option("--endpoint", default=None, help="Cluster endpoint, used without auth instead of a config file")
@click.option("--json", is_flag=True)
@click.option('-v', '--verbose', count=True, help="Verbosity level. Default is warn, -v is info, -vv is debug.")
@click.pass_context
def cli(ctx, config_file, endpoint, json, verbose):
    logging.basicConfig(level=logging.WARN - (10 * verbose))
    logger.info(f"Logging set to {logging.getLevelName(logger.getEffectiveLevel())}")
    ctx.obj = Context(config_file, endpoint)
    ctx.obj.json = json


@cli.command(name="start")
@root_option
@force_option
@click.pass_obj
def start_cmd(ctx, root, force):
    """Provision every pipeline, template, index and mapping found under the root."""
    results = beyonder_.start(ctx.env.cluster, ctx.root(root), ctx.force(force))
    if ctx.json:
        click.echo(json.dumps({key: outcome.value for key, outcome in results.items()}))
        return
    if not results:
        click.echo("Nothing to provision.")
    for key, outcome in results.items():
        click.echo(f"{key}: {outcome.value}")


@cli.command(name="connection-check")
@click.pass_obj
def connection_check_cmd(ctx):
    """Checks if a connection can be established to the cluster"""
    result = clusters_.connection_check(ctx.env.cluster)
    click.echo(result.connection_message)
    if result.connection_established:
        click.echo(f"Cluster version: {result.cluster_version}")
    else:
        raise click.ClickException("Connection check failed")


# ##################### INDICES ###################


@cli.group(name="index", help="Commands to create and update indices")
def index_group():
    pass


@index_group.command(name="create")
@click.argument("index")
@root_option
@force_option
@click.pass_obj
def create_index_cmd(ctx, index, root, force):
    """Create INDEX from its _settings.json definition."""
    echo_outcome(ctx, f"index:{index}", beyonder_.create_index(ctx.env.cluster, index, ctx.root(root),
                                                               ctx.force(force)))


@index_group.command(name="update-settings")
@click.argument("index")
@root_option
@click.pass_obj
def update_settings_cmd(ctx, index, root):
    """Apply the _update_settings.json definition to an existing INDEX."""
    echo_outcome(ctx, f"index_settings:{index}", beyonder_.update_settings(ctx.env.cluster, index, ctx.root(root)))


# ##################### MAPPINGS ###################


@cli.group(name="mapping", help="Commands to create type mappings")
def mapping_group():
    pass


@mapping_group.command(name="create")
@click.argument("index")
@click.argument("type_name", metavar="TYPE", default="_doc")
@root_option
@force_option
@click.pass_obj
def create_mapping_cmd(ctx, index, type_name, root, force):
    """Put the TYPE mapping of INDEX, read from INDEX/TYPE.json."""
    outcome = beyonder_.create_mapping(ctx.env.cluster, index, type_name, ctx.root(root), ctx.force(force))
    echo_outcome(ctx, f"mapping:{index}/{type_name}", outcome)


# ##################### TEMPLATES ###################


@cli.group(name="template", help="Commands to create index templates")
def template_group():
    pass


@template_group.command(name="create")
@click.argument("name")
@click.option("--kind", type=click.Choice(list(TEMPLATE_KINDS.keys()), case_sensitive=False), default="legacy",
              show_default=True, help="Template flavor: legacy (_template), index or component")
@root_option
@force_option
@click.pass_obj
def create_template_cmd(ctx, name, kind, root, force):
    create_fn = TEMPLATE_KINDS[kind.lower()]
    echo_outcome(ctx, f"template:{name}", create_fn(ctx.env.cluster, name, ctx.root(root), ctx.force(force)))


# ##################### PIPELINES ###################


@cli.group(name="pipeline", help="Commands to create ingest pipelines")
def pipeline_group():
    pass


@pipeline_group.command(name="create")
@click.argument("pipeline")
@root_option
@force_option
@click.pass_obj
def create_pipeline_cmd(ctx, pipeline, root, force):
    echo_outcome(ctx, f"pipeline:{pipeline}", beyonder_.create_pipeline(ctx.env.cluster, pipeline, ctx.root(root),
                                                                        ctx.force(force)))


#################################################


def main():
    try:
        cli()
    except Exception as e:
        # Verbose mode lowers the root logger to INFO or DEBUG
        root_logger = logging.getLogger()
        if root_logger.getEffectiveLevel() <= logging.INFO:
            import traceback
            click.echo("Error occurred with verbose mode enabled, showing full traceback:", err=True)
            click.echo(traceback.format_exc(), err=True)
        else:
            click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
