"""
csp_html CLI
"""
import argparse
import json
import sys
from pathlib import Path

from csp_html.config.loader import get_settings
from csp_html.errors import ConfigurationError
from csp_html.logging_config import setup_logging
from csp_html.pipeline import BuildContext, BuildPipeline, GeneratedDocument
from csp_html.plugin import CspHtmlPlugin
from csp_html.policy.hasher import Hasher
from csp_html.policy.serializer import parse_policy


def _load_policy(raw):
    """Accept a JSON object or a CSP string such as "script-src 'self'"."""
    if not raw:
        return {}
    if raw.lstrip().startswith("{"):
        policy = json.loads(raw)
        if not isinstance(policy, dict):
            raise ValueError("--policy JSON must be an object")
        return policy
    return parse_policy(raw)


def _inject(args):
    options = {"dev_allow_unsafe": args.dev_allow_unsafe}
    if args.hashing_method:
        options["hashing_method"] = args.hashing_method
    plugin = CspHtmlPlugin(_load_policy(args.policy), options)

    pipeline = BuildPipeline()
    plugin.apply(pipeline)

    paths = [Path(p) for p in args.files]
    documents = [
        GeneratedDocument(name=path.name, html=path.read_text(encoding="utf-8"), xhtml=args.xhtml)
        for path in paths
    ]
    emitted, context = pipeline.run(documents, BuildContext())

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)
    for path, document in zip(paths, emitted):
        target = output_dir / path.name if output_dir else path
        target.write_text(document.html, encoding="utf-8")
        print(f"{document.name}: {context.policies.get(document.name) or ''}")

    for error in context.errors:
        print(f"error: {error}", file=sys.stderr)
    return 1 if context.errors else 0


def _hash(args):
    content = sys.stdin.read() if args.content == "-" else args.content
    print(Hasher(args.hashing_method).hash(content))
    return 0


def main(argv=None):
    """Main CLI entry point"""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Inject a Content-Security-Policy meta tag into HTML files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Inject the default policy in place
  python -m csp_html inject dist/index.html

  # Custom policy, written to another directory
  python -m csp_html inject dist/*.html --policy "script-src 'self' https://cdn.example.com" --output-dir out

  # Hash an inline script body
  python -m csp_html hash "alert(1)" --hashing-method sha384
        """
    )
    parser.add_argument('--log-level', default=settings.log_level, help='Log level')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    inject_parser = subparsers.add_parser('inject', help='Inject a policy into HTML files')
    inject_parser.add_argument('files', nargs='+', help='HTML files to process')
    inject_parser.add_argument('--policy', help='Policy as a JSON object or CSP string')
    inject_parser.add_argument('--hashing-method', choices=['sha256', 'sha384', 'sha512'],
                               help='Digest used for inline hashes')
    inject_parser.add_argument('--xhtml', action='store_true', default=settings.xhtml,
                               help='Serialize as XHTML')
    inject_parser.add_argument('--dev-allow-unsafe', action='store_true',
                               default=settings.dev_allow_unsafe,
                               help="Skip hashes/nonces where 'unsafe-inline' or 'unsafe-eval' is allowed")
    inject_parser.add_argument('--output-dir', help='Write results here instead of in place')

    hash_parser = subparsers.add_parser('hash', help='Print the CSP hash source of a string')
    hash_parser.add_argument('content', help="Content to hash, or '-' for stdin")
    hash_parser.add_argument('--hashing-method', choices=['sha256', 'sha384', 'sha512'],
                             default=settings.hashing_method, help='Digest to use')

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level, json_format=settings.log_json)

    try:
        if args.command == 'inject':
            return _inject(args)
        return _hash(args)
    except (ConfigurationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
