"""Command line entry: `warp-kitten play` opens the window, `warp-kitten serve` runs the API."""

import argparse

from .log import log
from .settings import HEIGHT, WIDTH, load_config


def _play(args) -> int:
    # Imported here so `serve` works on machines without a display
    from .game import Game

    config = load_config(args.config)
    game = Game(config, width=args.width, height=args.height)
    log("Game instance created. Running game loop...")
    game.run()
    return 0


def _serve(args) -> int:
    import uvicorn

    from .server import create_app

    app = create_app(args.db, cors_allow_origins=args.cors_allow_origin)
    print(f"Warp Kitten API: http://{args.host}:{args.port}/api/powers")
    uvicorn.run(app, host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="warp-kitten", description="Toss treats to a hungry kitten.")
    sub = parser.add_subparsers(dest="command")

    play = sub.add_parser("play", help="Open the kitten window (default)")
    play.add_argument("--config", default=None, help="JSON file with simulation overrides")
    play.add_argument("--width", type=int, default=WIDTH)
    play.add_argument("--height", type=int, default=HEIGHT)
    play.set_defaults(func=_play)

    serve = sub.add_parser("serve", help="Run the powers/inventory HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--db", default="warp_kitten.db", help="sqlite file (':memory:' for a throwaway one)")
    serve.add_argument("--cors-allow-origin", action="append", default=[], help="CORS allow origin (repeatable)")
    serve.add_argument("--log-level", default="info", choices=["critical", "error", "warning", "info", "debug", "trace"])
    serve.set_defaults(func=_serve)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(["play"] + list(argv or []))
    return args.func(args)
