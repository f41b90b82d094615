#!/usr/bin/env python3
"""Command line entry point: serve the app, or parse/render/optimize a resume."""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .client import ApiError, build_client
from .services.parser import STRATEGIES, extract_contact_info, parse_resume


def read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def cmd_serve(args) -> int:
    from . import create_app
    app = create_app(args.env)
    app.run(host=args.host, port=args.port)
    return 0


def cmd_parse(args) -> int:
    parsed = parse_resume(read_text(args.file), args.strategy)
    out = parsed.as_dict()
    out["contact"] = extract_contact_info(parsed.header).as_dict()
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


def cmd_render(args) -> int:
    from . import create_app
    from .services.renderer import render_docx, render_html, render_pdf, render_plaintext

    # rendering only needs templates; no model calls are made
    app = create_app(args.env, OPENAI_CLIENT=None)
    text = read_text(args.file)
    with app.app_context():
        if args.format == "docx":
            data = render_docx(text, args.strategy).getvalue()
        elif args.format == "txt":
            data = render_plaintext(text, args.strategy).encode("utf-8")
        else:
            html = render_html(text, args.template, args.strategy, for_pdf=(args.format == "pdf"))
            data = render_pdf(html) if args.format == "pdf" else html.encode("utf-8")

    if args.output:
        Path(args.output).write_bytes(data)
        print(f"Wrote {len(data)} bytes to {args.output}")
    else:
        sys.stdout.buffer.write(data)
    return 0


def cmd_optimize(args) -> int:
    client = build_client(args.base_url, timeout=args.timeout)
    try:
        if args.resume.lower().endswith((".pdf", ".doc", ".docx")):
            resume_text = client.upload_resume(args.resume)
        else:
            resume_text = read_text(args.resume)
        result = client.optimize(resume_text, read_text(args.job))
    except ApiError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1

    print(f"Match score: {result.get('matchScore')}")
    print("Missing keywords: " + ", ".join(result.get("missingKeywords") or []))
    for s in result.get("suggestions") or []:
        print(f"  - {s}")
    if args.output:
        Path(args.output).write_text(result.get("optimizedResume", ""), encoding="utf-8")
        print(f"Optimized resume written to {args.output}")
    else:
        print()
        print(result.get("optimizedResume", ""))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="atsresume", description="ATS resume optimizer")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the web app")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=int(os.getenv("PORT", 5000)))
    p.add_argument("--env", default=None)
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("parse", help="Split resume text into sections (JSON)")
    p.add_argument("file")
    p.add_argument("--strategy", choices=sorted(STRATEGIES), default="heuristic")
    p.set_defaults(func=cmd_parse)

    p = sub.add_parser("render", help="Render resume text with a template")
    p.add_argument("file")
    p.add_argument("--template", default="professional")
    p.add_argument("--format", choices=("html", "pdf", "docx", "txt"), default="html")
    p.add_argument("--strategy", choices=sorted(STRATEGIES), default=None)
    p.add_argument("--env", default=None)
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("optimize", help="Optimize a resume through a running backend")
    p.add_argument("--resume", required=True, help="PDF/DOC/DOCX or plain-text resume")
    p.add_argument("--job", required=True, help="Plain-text job description")
    p.add_argument("--base-url", default=None, help="defaults to $ATSRESUME_API_URL or http://localhost:5000")
    p.add_argument("--timeout", type=float, default=60)
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_optimize)
    return parser


def main(argv=None) -> int:
    # settings are read from os.environ at app/client build time, so this must run first
    load_dotenv(find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
