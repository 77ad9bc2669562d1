"""Command line entry point: ``python -m vault2gm``."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from vault2gm.config import VAULT2GM_PUBLIC_URL, VAULT2GM_SETTINGS_PATH
from vault2gm.controller import VaultController
from vault2gm.exceptions import Vault2gmError
from vault2gm.parsers import ParseMode
from vault2gm.settings import SettingsStore
from vault2gm.tunnel import StaticUrlTunnel
from vault2gm.utils.logging_config import configure_logging, get_logger
from vault2gm.vault import Vault

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vault2gm",
        description="Export a markdown vault as a GM Vault JSON tree and serve its pages.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: VAULT2GM_LOG_LEVEL or INFO)")
    commands = parser.add_subparsers(dest="command", required=True)

    mode_choices = [mode.value for mode in ParseMode]

    serve = commands.add_parser("serve", help="Serve /gm-vault and /pages/:slug on localhost")
    serve.add_argument("vault", help="Vault root folder")
    serve.add_argument("--entry", help="Session page, relative to the vault root")
    serve.add_argument("--mode", choices=mode_choices, help="Tree extraction strategy")
    serve.add_argument("--port", type=int, help="Local port")
    serve.add_argument("--public-url", default=VAULT2GM_PUBLIC_URL, help="Public URL of an external tunnel")
    serve.add_argument("--settings", default=str(VAULT2GM_SETTINGS_PATH), help="Settings file")

    export = commands.add_parser("export", help="Print the GM Vault JSON tree")
    export.add_argument("vault", help="Vault root folder")
    export.add_argument("--entry", required=True, help="Session page, relative to the vault root")
    export.add_argument("--mode", choices=mode_choices, default=ParseMode.FOLDER.value)
    export.add_argument("--base-url", help="Base URL for page links")

    render = commands.add_parser("render", help="Print the HTML of one page")
    render.add_argument("vault", help="Vault root folder")
    render.add_argument("slug", help="Page slug")
    render.add_argument("--base-url", help="Base URL for absolute links")

    return parser


async def _serve(args: argparse.Namespace) -> int:
    tunnel = StaticUrlTunnel(args.public_url) if args.public_url else None
    controller = VaultController(
        Vault(args.vault),
        tunnel=tunnel,
        settings_store=SettingsStore(args.settings),
    )
    await controller.load_settings(restart=False)

    if args.port is not None:
        controller.port = args.port
    if args.mode:
        controller.set_mode(args.mode)
    if args.entry:
        controller.select_entry(args.entry)

    if not await controller.enable_server():
        return 1

    try:
        await asyncio.Event().wait()
    finally:
        await controller.cleanup()
    return 0


async def _export(args: argparse.Namespace) -> int:
    controller = VaultController(Vault(args.vault), mode=args.mode, notify=lambda message: None)
    if args.base_url:
        controller.json_builder.set_base_url(args.base_url)
    controller.select_entry(args.entry)
    print(json.dumps(await controller.export_json(), indent=2, ensure_ascii=False))
    return 0


async def _render(args: argparse.Namespace) -> int:
    controller = VaultController(Vault(args.vault), notify=lambda message: None)
    if args.base_url:
        controller.json_builder.set_base_url(args.base_url)
    print(await controller.render_slug(args.slug))
    return 0


_COMMANDS = {"serve": _serve, "export": _export, "render": _render}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_logging(args.log_level.upper())
    else:
        configure_logging()

    try:
        return asyncio.run(_COMMANDS[args.command](args))
    except KeyboardInterrupt:
        return 0
    except Vault2gmError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
