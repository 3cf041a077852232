#!/usr/bin/python3
import argparse
import logging
import sys
from typing import List

from AhoCorasick import AhoCorasick
import ac_common as acc
import trie_dumper


def read_corpus(path: str, as_bytes: bool):
    if path == "-":
        if as_bytes:
            return sys.stdin.buffer.read()
        return sys.stdin.read()
    if as_bytes:
        with open(path, "rb") as f:
            return f.read()
    with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
        return f.read()


def render(text) -> str:
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="backslashreplace")
    return text


def build_matcher(args) -> AhoCorasick:
    patterns: List = []
    if args.pattern_file:
        patterns.extend(acc.load_patterns(args.pattern_file, as_bytes=args.bytes))
    for pattern in args.expr or []:
        patterns.append(pattern.encode("utf-8") if args.bytes else pattern)
    matcher = AhoCorasick(patterns, allow_empty_set=False)
    logging.info(f"Built matcher for {len(matcher)} patterns")
    if args.dump:
        trie_dumper.dump(matcher.trie, args.dump)  # type: ignore
    return matcher


def grep_file(matcher: AhoCorasick, path: str, args, out) -> int:
    corpus = read_corpus(path, args.bytes)
    count = 0
    if args.first:
        start = matcher.find_first(corpus)
        if start == len(corpus):
            return 0
        out.write(f"{path}:{start}\n")
        return 1
    for match in matcher.finditer(corpus):
        count += 1
        text = render(corpus[match.start : match.end])
        out.write(f"{path}:{match.start}:{match.pattern_id}:{text}\n")
    logging.debug(f"{path}: {count} matches")
    return count


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Search files for many fixed patterns at once"
    )
    parser.add_argument("-f", "--pattern-file", help="File with one pattern per line")
    parser.add_argument("files", nargs="*", default=["-"], help="Files to search ('-' for stdin)")
    parser.add_argument("-e", "--expr", action="append", help="Extra pattern (repeatable)")
    parser.add_argument("--first", action="store_true", help="Only report the first match per file")
    parser.add_argument("--bytes", action="store_true", help="Match raw bytes instead of text")
    parser.add_argument("--dump", metavar="NAME", help="Render the trie to AC_DUMP_DIR/NAME.svg")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)
    if not args.pattern_file and not args.expr:
        parser.error("need a pattern file or at least one -e PATTERN")
    return args


def main(argv=None, out=None) -> int:
    args = parse_args(argv)
    acc.setup_logging(enabled=args.verbose or acc.logging_enabled_by_env())
    if out is None:
        out = sys.stdout

    try:
        matcher = build_matcher(args)
        total = 0
        for path in args.files:
            total += grep_file(matcher, path, args, out)
    except (OSError, ValueError) as e:
        sys.stderr.write(f"ac_grep: {e}\n")
        return 2
    return 0 if total > 0 else 1


if __name__ == "__main__":
    sys.exit(main())
