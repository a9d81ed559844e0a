"""treestore CLI: git-style plumbing commands over a loose object store."""

import logging
from contextlib import contextmanager

import click

from .engine import TreeStoreEngine
from .errors import TreeStoreError
from .model.tree import encode_name


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _engine(ctx) -> TreeStoreEngine:
    return TreeStoreEngine(ctx.obj["git_dir"])


@contextmanager
def _store_errors():
    """Turn store errors into a clean CLI failure."""
    try:
        yield
    except TreeStoreError as exc:
        raise click.ClickException(str(exc))


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--git-dir", type=click.Path(file_okay=False), default=".git",
              envvar="TREESTORE_GIT_DIR", show_default=True,
              help="Store root holding objects/ (or set TREESTORE_GIT_DIR).")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, git_dir, verbose):
    """treestore: a content-addressed store of blobs and trees.

    \b
    Quick start:
      treestore init
      treestore hash-object -w file.txt
      treestore write-tree
      treestore ls-tree --name-only <hash>
      treestore cat-file -p <hash>
    """
    ctx.ensure_object(dict)
    ctx.obj["git_dir"] = git_dir
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def init(ctx):
    """Create the store layout (objects/, refs/, HEAD)."""
    engine = _engine(ctx)
    with _store_errors():
        engine.initialize()
    _status(ctx, f"Initialized {engine.store_path}")
    click.echo("Initialized git directory")


# ---------------------------------------------------------------------------
# hash-object
# ---------------------------------------------------------------------------

@main.command("hash-object")
@click.option("-w", "write", is_flag=True, help="Write the blob into the store.")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def hash_object(ctx, write, file):
    """Print the blob hash of FILE."""
    with _store_errors():
        obj_hash = _engine(ctx).hash_object(file, write=write)
    click.echo(obj_hash, nl=False)


# ---------------------------------------------------------------------------
# cat-file
# ---------------------------------------------------------------------------

@main.command("cat-file")
@click.option("-p", "pretty", is_flag=True, help="Print the object's content.")
@click.argument("object_hash", metavar="HASH")
@click.pass_context
def cat_file(ctx, pretty, object_hash):
    """Write the content of an object to stdout, byte for byte."""
    if not pretty:
        raise click.UsageError("cat-file requires -p")
    with _store_errors():
        payload = _engine(ctx).cat_file(object_hash)
    click.echo(payload, nl=False)


# ---------------------------------------------------------------------------
# ls-tree
# ---------------------------------------------------------------------------

@main.command("ls-tree")
@click.option("--name-only", is_flag=True, help="List entry names only.")
@click.argument("tree_hash", metavar="HASH")
@click.pass_context
def ls_tree(ctx, name_only, tree_hash):
    """List the entries of a tree, sorted by name."""
    with _store_errors():
        lines = _engine(ctx).ls_tree(tree_hash, name_only=name_only)
    for line in lines:
        # names may carry undecodable filename bytes
        click.echo(encode_name(line))


# ---------------------------------------------------------------------------
# write-tree
# ---------------------------------------------------------------------------

@main.command("write-tree")
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.pass_context
def write_tree(ctx, directory):
    """Snapshot DIRECTORY (default: .) and print the root tree hash."""
    with _store_errors():
        tree_hash = _engine(ctx).write_tree(directory)
    if tree_hash is None:
        _status(ctx, "Nothing to snapshot")
        return
    click.echo(tree_hash)


# ---------------------------------------------------------------------------
# fsck
# ---------------------------------------------------------------------------

@main.command()
@click.argument("tree_hash", metavar="[HASH]", required=False)
@click.pass_context
def fsck(ctx, tree_hash):
    """Verify one tree recursively, or every stored object."""
    engine = _engine(ctx)
    if tree_hash:
        result = engine.verify_tree(tree_hash)
        errors = result["errors"]
    else:
        with _store_errors():
            result = engine.detect_tampering()
        errors = result["errors"]
        _status(ctx, f"Verified {result['verified']} objects")

    for error in errors:
        click.echo(error, err=True)
    if errors:
        raise click.ClickException(f"{len(errors)} problem(s) found")
