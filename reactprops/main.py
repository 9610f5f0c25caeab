import os
import json
import shutil
import traceback
import argparse
import sys
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor

import pathspec
from tqdm import tqdm

from reactprops.config import ExtractorConfig
from reactprops.log import configure_logging, get_logger
from reactprops.models import ReactFile
from reactprops.registry.extractor_registry import get_extractor

log = get_logger("cli")

EXT_MAP = {
    "typescript": [".ts", ".tsx", ".mts", ".cts"],
    "javascript": [".js", ".jsx", ".mjs", ".cjs"],
}

INVERSE_EXTS = {ext: lang for lang, exts in EXT_MAP.items() for ext in exts}

# always skipped, on top of the repository's .gitignore
DEFAULT_IGNORES = ["node_modules/", ".git/"]

INDEX_FILE = "index.json"


def analyze_react_file(filename: str, code: str, config=None) -> ReactFile:
    """Extract the exported components of ``code`` and the props they accept."""
    return get_extractor(INVERSE_EXTS.get(Path(filename).suffix.lower(), "typescript"), config).analyze(filename, code)


def collect_source_files(root_dir: Path):
    gitignore_pth = root_dir / ".gitignore"
    gitign_pattern = gitignore_pth.read_text().splitlines() if gitignore_pth.exists() else []
    spec = pathspec.PathSpec.from_lines("gitwildmatch", DEFAULT_IGNORES + gitign_pattern)

    files = []
    for file_path in root_dir.rglob("*"):
        if not file_path.is_file() or spec.match_file(str(file_path.relative_to(root_dir))):
            continue
        language = INVERSE_EXTS.get(file_path.suffix.lower())
        if language:
            files.append((file_path, language))
    return sorted(files)


def _process_single_file_worker(args):
    code_path, language_str, root_dir_path, output_base_path, config = args
    try:
        extractor_instance = get_extractor(language_str, config)
        rel_path = os.path.relpath(code_path, root_dir_path)
        react_file = extractor_instance.process_file(str(code_path), filename=rel_path.replace("\\", "/"))
        json_rel = os.path.splitext(rel_path)[0] + ".json"
        out_path = os.path.join(output_base_path, json_rel)
        os.makedirs(os.path.dirname(out_path), exist_ok=True)
        extractor_instance.write_to_file(out_path)
        return react_file.to_dict()
    except Exception:
        print(traceback.format_exc())
        print(f"Unable to process - {code_path}. Skipping it.")
        return None


def create_component_data(root_dir, output_base: str = "./output/components", clear_existing: bool = True,
                          workers: int = None, config: ExtractorConfig = None):
    root_dir = Path(root_dir)
    files = collect_source_files(root_dir)
    log.info("Found %d source files under %s", len(files), root_dir)

    if os.path.isdir(output_base) and clear_existing:
        shutil.rmtree(output_base, ignore_errors=True)
    os.makedirs(output_base, exist_ok=True)

    config = config or ExtractorConfig.from_env()
    max_workers = workers or min(32, (os.cpu_count() or 1) + 4)
    tasks_args = [(code_path, language, root_dir, output_base, config) for code_path, language in files]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        outputs = list(tqdm(executor.map(_process_single_file_worker, tasks_args), total=len(tasks_args),
                            desc="Extracting components", unit="file"))

    processed = [o for o in outputs if o is not None]
    failed = len(outputs) - len(processed)
    if failed:
        print(f"Total unprocessable files: {failed}")

    index_path = os.path.join(output_base, INDEX_FILE)
    with open(index_path, "w", encoding="utf-8") as f:
        json.dump([o for o in processed if o["components"]], f, indent=2, ensure_ascii=False)

    total = sum(len(o["components"]) for o in processed)
    print(f"Done! {total} components from {len(processed)} files. All outputs in: {output_base}")
    return processed


def main():
    parser = argparse.ArgumentParser(description='React component props extractor')
    subparsers = parser.add_subparsers(dest='function', help='Available functions')

    parser_analyze = subparsers.add_parser('analyze', help='Print the components of a single file as JSON')
    parser_analyze.add_argument('file', help='Source file to analyze')
    parser_analyze.add_argument('--log', default=None,
                                help='Subsystems to log, "*" for all (default: $LOG)')

    parser_extract = subparsers.add_parser('extract', help='Extract components of every source file in a directory')
    parser_extract.add_argument('root_dir', help='Root directory to scan for source files')
    parser_extract.add_argument('--output_base', default='./output/components',
                                help='Output base directory (default: ./output/components)')
    parser_extract.add_argument('--no_clear', action='store_true',
                                help='Do not clear the existing output directory')
    parser_extract.add_argument('--workers', type=int, default=None,
                                help='Number of worker threads')
    parser_extract.add_argument('--log', default=None,
                                help='Subsystems to log, "*" for all (default: $LOG)')

    args = parser.parse_args()

    if not args.function:
        parser.print_help()
        return

    configure_logging(args.log)

    try:
        if args.function == 'analyze':
            extractor = get_extractor(INVERSE_EXTS.get(Path(args.file).suffix.lower(), "typescript"),
                                      ExtractorConfig.from_env())
            react_file = extractor.process_file(args.file)
            print(json.dumps(react_file.to_dict(), indent=2, ensure_ascii=False))

        elif args.function == 'extract':
            clear_existing = not args.no_clear

            print(f"Extracting components from: {args.root_dir}")
            print(f"Output base: {args.output_base}")
            print(f"Clear existing: {clear_existing}")

            create_component_data(
                root_dir=args.root_dir,
                output_base=args.output_base,
                clear_existing=clear_existing,
                workers=args.workers,
            )

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
