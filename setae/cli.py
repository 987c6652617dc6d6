#!/usr/bin/env python3
"""
setae command line interface
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, TextIO

from loguru import logger
from rich.console import Console

from setae.artifacts.builder import ArtifactDraft, build_artifact_body, completion_rule_for
from setae.artifacts.merge import update_artifact
from setae.artifacts.models import VARIANT_TYPES
from setae.artifacts.waiter import ArtifactWaiter, MessageWaiter
from setae.client.client import SetaeClient
from setae.config.resolver import resolve_backend
from setae.config.store import BackendConfig, ConfigStore
from setae.errors import (
    BackendError,
    ConflictError,
    NotFoundError,
    PayloadValidationError,
    SetaeError,
    WaitTimeoutError,
)
from setae.render.artifacts import format_artifact, format_artifacts
from setae.render.threads import format_messages, format_threads
from setae.utils.logging import configure_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 2
EXIT_BACKEND = 3


@dataclass
class CliContext:
    store: ConfigStore
    client_factory: Callable[[BackendConfig], Any] = SetaeClient.from_backend
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    out: Console = field(default_factory=lambda: Console(emoji=False, highlight=False))
    err: Console = field(default_factory=lambda: Console(stderr=True, emoji=False, highlight=False))

    def emit(self, text: str) -> None:
        self.out.print(text, markup=False, soft_wrap=True)

    def fail(self, text: str) -> None:
        self.err.print(text, markup=False, soft_wrap=True)

    def client(self, args: argparse.Namespace) -> Any:
        backend = resolve_backend(args.backend, url=args.url, token=args.token, store=self.store)
        return self.client_factory(backend)


# Auth


def cmd_auth_add(args, ctx: CliContext) -> int:
    ctx.store.set_backend(args.name, BackendConfig(url=args.backend_url, token=args.backend_token))
    ctx.emit(f'Saved backend "{args.name}" → {args.backend_url}')
    return EXIT_OK


def cmd_auth_default(args, ctx: CliContext) -> int:
    ctx.store.set_default(args.name)
    ctx.emit(f'Default backend set to "{args.name}"')
    return EXIT_OK


def cmd_auth_list(args, ctx: CliContext) -> int:
    backends = ctx.store.list_backends()
    if not backends:
        ctx.emit("No backends configured. Run: setae auth add <name> <url> <token>")
        return EXIT_OK
    for entry in backends:
        marker = " (default)" if entry.is_default else ""
        ctx.emit(f"  {entry.name}{marker}  {entry.url}")
    return EXIT_OK


def cmd_auth_remove(args, ctx: CliContext) -> int:
    ctx.store.remove_backend(args.name)
    ctx.emit(f'Removed backend "{args.name}"')
    return EXIT_OK


# Threads


def cmd_threads(args, ctx: CliContext) -> int:
    data = ctx.client(args).list_endpoints()
    ctx.emit(format_threads(data.endpoints, args.json))
    return EXIT_OK


def cmd_read(args, ctx: CliContext) -> int:
    data = ctx.client(args).read_messages(args.category, args.name)
    ctx.emit(format_messages(data.messages, args.json))
    return EXIT_OK


def _message_text(args, ctx: CliContext) -> Optional[str]:
    if args.text is not None:
        return args.text
    return ctx.stdin.read().rstrip()


def cmd_send(args, ctx: CliContext) -> int:
    client = ctx.client(args)
    text = _message_text(args, ctx)
    if not text:
        ctx.fail("No message text provided. Pass as argument or pipe via stdin.")
        return EXIT_FAILURE
    response = client.post_message(args.category, args.name, text)
    if args.json:
        ctx.emit(json.dumps(response.to_wire(), indent=2))
    else:
        ctx.emit(f"Sent to {response.endpoint.category}/{response.endpoint.name}")
    return EXIT_OK


def cmd_new(args, ctx: CliContext) -> int:
    client = ctx.client(args)
    text = _message_text(args, ctx)
    if not text:
        ctx.fail("No message text provided. Pass as argument or pipe via stdin.")
        return EXIT_FAILURE
    response = client.create_thread(args.category, text)
    if args.json:
        ctx.emit(json.dumps(response.to_wire(), indent=2))
    else:
        ctx.emit(f"Created {response.endpoint.category}/{response.endpoint.name}")
    return EXIT_OK


def cmd_thread_update(args, ctx: CliContext) -> int:
    if not args.title and not args.note:
        ctx.fail("Provide at least one of: --title, --note")
        return EXIT_FAILURE
    response = ctx.client(args).update_endpoint_meta(
        args.category,
        args.name,
        display_name=args.title,
        note=args.note,
    )
    if args.json:
        ctx.emit(json.dumps(response.to_wire(), indent=2))
        return EXIT_OK
    ctx.emit(f"Updated {args.category}/{args.name}")
    if response.meta.display_name:
        ctx.emit(f"  title: {response.meta.display_name}")
    if response.meta.note:
        ctx.emit(f"  note: {response.meta.note}")
    return EXIT_OK


def cmd_wait(args, ctx: CliContext) -> int:
    waiter = MessageWaiter(ctx.client(args))
    messages = waiter.wait(args.category, args.name, float(args.timeout))
    ctx.emit(format_messages(messages, args.json))
    return EXIT_OK


# Artifacts


def cmd_artifact_create(args, ctx: CliContext) -> int:
    client = ctx.client(args)
    document = args.document
    if args.document_file:
        document = Path(args.document_file).read_text(encoding="utf-8")

    draft = ArtifactDraft(
        type=args.type,
        title=args.title,
        prompt=args.prompt,
        options=args.option,
        items=args.item,
        headings=args.heading,
        multi_select=args.multi_select,
        document=document,
    )
    completion = completion_rule_for(args.completion)
    body = build_artifact_body(
        draft,
        description=args.description,
        conversation=args.conversation,
        completion=completion,
    )
    created = client.put_artifact(args.category, args.name, body)
    logger.info(f"Created artifact {args.category}/{args.name}")

    if args.wait:
        waiter = ArtifactWaiter(client)
        created = waiter.wait(args.category, args.name, float(args.timeout), completion)
    ctx.emit(format_artifact(created, args.json))
    return EXIT_OK


def cmd_artifact_get(args, ctx: CliContext) -> int:
    client = ctx.client(args)
    artifact = client.get_artifact(args.category, args.name)
    if args.wait:
        waiter = ArtifactWaiter(client)
        artifact = waiter.wait(args.category, args.name, float(args.timeout), artifact.completion)
    ctx.emit(format_artifact(artifact, args.json))
    return EXIT_OK


def _load_payload_update(args) -> Any:
    if args.payload_file:
        raw = Path(args.payload_file).read_text(encoding="utf-8")
    elif args.payload:
        raw = args.payload
    else:
        raise PayloadValidationError("Provide --payload or --payload-file")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PayloadValidationError(f"Invalid JSON payload: {exc}") from exc


def cmd_artifact_update(args, ctx: CliContext) -> int:
    update = _load_payload_update(args)
    updated = update_artifact(ctx.client(args), args.category, args.name, update)
    ctx.emit(format_artifact(updated, args.json))
    return EXIT_OK


def cmd_artifact_list(args, ctx: CliContext) -> int:
    artifacts = ctx.client(args).list_artifacts(args.status)
    ctx.emit(format_artifacts(artifacts, args.json))
    return EXIT_OK


def cmd_artifact_delete(args, ctx: CliContext) -> int:
    ctx.client(args).delete_artifact(args.category, args.name)
    ctx.emit(f"Deleted artifact {args.category}/{args.name}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="setae", description="CLI for interacting with setae backends")
    parser.add_argument("--json", action="store_true", help="output as JSON")
    parser.add_argument("--url", help="backend URL (overrides config)")
    parser.add_argument("--token", help="bearer token (overrides config)")
    parser.add_argument("-b", "--backend", help="backend name (from config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log requests and polls to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # auth
    auth = subparsers.add_parser("auth", help="manage backend authentication")
    auth_sub = auth.add_subparsers(dest="auth_command", required=True)

    auth_add = auth_sub.add_parser("add", help="add or update a named backend")
    auth_add.add_argument("name")
    auth_add.add_argument("backend_url", metavar="url")
    auth_add.add_argument("backend_token", metavar="token")
    auth_add.set_defaults(func=cmd_auth_add)

    auth_default = auth_sub.add_parser("default", help="set the default backend")
    auth_default.add_argument("name")
    auth_default.set_defaults(func=cmd_auth_default)

    auth_list = auth_sub.add_parser("list", help="list configured backends")
    auth_list.set_defaults(func=cmd_auth_list)

    auth_remove = auth_sub.add_parser("remove", help="remove a backend")
    auth_remove.add_argument("name")
    auth_remove.set_defaults(func=cmd_auth_remove)

    # threads
    threads = subparsers.add_parser("threads", help="list all threads")
    threads.set_defaults(func=cmd_threads)

    read = subparsers.add_parser("read", help="read messages from a thread")
    read.add_argument("category")
    read.add_argument("name")
    read.set_defaults(func=cmd_read)

    send = subparsers.add_parser("send", help="send a message to a thread")
    send.add_argument("category")
    send.add_argument("name")
    send.add_argument("text", nargs="?")
    send.set_defaults(func=cmd_send)

    new = subparsers.add_parser("new", help="create a new thread")
    new.add_argument("category")
    new.add_argument("text", nargs="?")
    new.set_defaults(func=cmd_new)

    thread = subparsers.add_parser("thread", help="manage thread metadata")
    thread_sub = thread.add_subparsers(dest="thread_command", required=True)
    thread_update = thread_sub.add_parser("update", help="set thread title and/or note")
    thread_update.add_argument("category")
    thread_update.add_argument("name")
    thread_update.add_argument("--title", help="set display name")
    thread_update.add_argument("--note", help="set note")
    thread_update.set_defaults(func=cmd_thread_update)

    wait = subparsers.add_parser("wait", help="block until a new message appears")
    wait.add_argument("category")
    wait.add_argument("name")
    wait.add_argument("--timeout", type=int, default=300, help="timeout in seconds")
    wait.set_defaults(func=cmd_wait)

    # artifacts
    artifact = subparsers.add_parser("artifact", help="manage artifacts (decisions, reviews, checklists)")
    artifact_sub = artifact.add_subparsers(dest="artifact_command", required=True)

    create = artifact_sub.add_parser("create", help="create a new artifact")
    create.add_argument("category")
    create.add_argument("name")
    create.add_argument("--type", required=True, choices=VARIANT_TYPES, help="artifact type")
    create.add_argument("--title", required=True, help="artifact title")
    create.add_argument("--prompt", help="question text")
    create.add_argument("--description", help="longer description/context")
    create.add_argument("--option", action="append", default=[], help="option as id:label[:desc] (repeatable)")
    create.add_argument("--item", action="append", default=[], help="item as id:label[:desc] (repeatable)")
    create.add_argument("--heading", action="append", default=[], help="heading as id:label (repeatable)")
    create.add_argument("--multi-select", action="store_true", help="allow multiple selections")
    create.add_argument("--document-file", help="load markdown from file (document_review)")
    create.add_argument("--document", help="inline markdown (document_review)")
    create.add_argument("--conversation", help="link to conversation endpoint as category:name")
    create.add_argument(
        "--completion",
        choices=["submit", "all_answered"],
        default="submit",
        help="completion mode",
    )
    create.add_argument("--wait", action="store_true", help="block until artifact is submitted")
    create.add_argument("--timeout", type=int, default=3600, help="timeout for --wait in seconds")
    create.set_defaults(func=cmd_artifact_create)

    get = artifact_sub.add_parser("get", help="get an artifact")
    get.add_argument("category")
    get.add_argument("name")
    get.add_argument("--wait", action="store_true", help="block until artifact is submitted")
    get.add_argument("--timeout", type=int, default=3600, help="timeout for --wait in seconds")
    get.set_defaults(func=cmd_artifact_get)

    update = artifact_sub.add_parser("update", help="update an artifact payload")
    update.add_argument("category")
    update.add_argument("name")
    update.add_argument("--payload-file", help="JSON file with payload updates")
    update.add_argument("--payload", help="inline JSON payload updates")
    update.set_defaults(func=cmd_artifact_update)

    listing = artifact_sub.add_parser("list", help="list all artifacts")
    listing.add_argument("--status", help="filter by status")
    listing.set_defaults(func=cmd_artifact_list)

    delete = artifact_sub.add_parser("delete", help="delete an artifact")
    delete.add_argument("category")
    delete.add_argument("name")
    delete.set_defaults(func=cmd_artifact_delete)

    return parser


def _describe_target(args) -> str:
    category = getattr(args, "category", None)
    name = getattr(args, "name", None)
    if category and name:
        return f"{category}/{name}"
    return category or name or ""


def main(argv: Optional[list[str]] = None, *, context: Optional[CliContext] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")
    ctx = context or CliContext(store=ConfigStore())

    try:
        return args.func(args, ctx)
    except NotFoundError:
        subject = "Artifact" if args.command == "artifact" else "Thread"
        ctx.fail(f"{subject} not found: {_describe_target(args)}")
        return EXIT_NOT_FOUND
    except ConflictError:
        ctx.fail("Artifact has been submitted and cannot be modified")
        return EXIT_FAILURE
    except BackendError as exc:
        ctx.fail(str(exc))
        return EXIT_BACKEND
    except WaitTimeoutError as exc:
        ctx.fail(str(exc))
        return EXIT_FAILURE
    except SetaeError as exc:
        ctx.fail(str(exc))
        return EXIT_FAILURE
    except OSError as exc:
        ctx.fail(str(exc))
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
