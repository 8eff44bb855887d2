"""
Command line interface: generate code for a workspace JSON file.

    visual-codegen program.json -o program.zig
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import GeneratorConfig
from .exceptions import CodegenError, SynthesisError
from .models import Workspace
from .zig import create_generator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='visual-codegen',
        description='Generate Zig source code from a block workspace.')
    parser.add_argument('workspace', help='workspace JSON file, or - for stdin')
    parser.add_argument('-o', '--output', help='write code to this file instead of stdout')
    parser.add_argument('--indent', help='indent unit (default: four spaces)')
    parser.add_argument('--zero-based', action='store_true',
                        help='treat list and text indexes as zero-based')
    parser.add_argument('--statement-prefix', help='text inserted before every statement')
    parser.add_argument('--statement-suffix', help='text inserted after every statement')
    parser.add_argument('--loop-trap', help='text inserted at the top of every loop body')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def load_workspace(path: str) -> Workspace:
    if path == '-':
        data = json.load(sys.stdin)
    else:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    return Workspace.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        config = GeneratorConfig.from_env().merged(
            indent_unit=args.indent,
            statement_prefix=args.statement_prefix,
            statement_suffix=args.statement_suffix,
            infinite_loop_trap=args.loop_trap,
            one_based_index=False if args.zero_based else None,
        )
        workspace = load_workspace(args.workspace)
        code = create_generator(config).workspace_to_code(workspace)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Cannot read workspace: %s", e)
        print(f"error: cannot read workspace: {e}", file=sys.stderr)
        return 1
    except SynthesisError as e:
        logger.error("Code generation failed for node %s: %s", e.node_id, e)
        print(f"error: {e} (node {e.node_id})", file=sys.stderr)
        return 1
    except CodegenError as e:
        logger.error("Invalid input: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(code)
    else:
        sys.stdout.write(code)
    return 0
