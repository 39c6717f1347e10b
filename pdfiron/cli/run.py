from pathlib import Path

from pdfiron.infra.config.runtime import load_pipeline_config
from pdfiron.infra.config.schemas import BinaryNames
from pdfiron.infra.errors import PdfIronError
from pdfiron.infra.pipeline.logger import create_logger
from pdfiron.infra.pipeline.runner import run_pipeline
from pdfiron.infra.pipeline.storage.workspace import Workspace


# argparse dest -> PipelineConfig field
CONFIG_ARGUMENTS = (
    'color_mode',
    'resolution',
    'convert_options',
    'layout',
    'output_pages',
    'unpaper_options',
    'unpaper_disable_filters',
    'language',
    'tesseract_options',
    'tesseract_threads',
    'workers',
    'disable_unpaper',
    'disable_tesseract',
    'step',
    'verbose',
    'show_progress',
)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def config_overrides(args) -> dict:
    return {name: getattr(args, name, None) for name in CONFIG_ARGUMENTS}


def binary_overrides(args) -> dict:
    return {tool: getattr(args, f'{tool}_binary', None) for tool in BinaryNames.tools()}


def cmd_run(args) -> int:
    """Iron one document. Returns the process exit code."""
    try:
        log_dir = Workspace.prepare_log_dir(getattr(args, 'log_dir', None))
    except PdfIronError as e:
        create_logger("pdfiron", "").error(str(e), error=e.__class__.__name__)
        return EXIT_ERROR

    console = create_logger(
        "pdfiron",
        "",
        log_dir=log_dir,
        filename="pdfiron.jsonl",
        level="DEBUG" if args.verbose else "INFO"
    )

    try:
        config = load_pipeline_config(
            overrides=config_overrides(args),
            binaries=binary_overrides(args),
            config_file=Path(args.config) if getattr(args, 'config', None) else None,
        )

        output = Workspace.expand_path(args.output) if args.output else None
        with Workspace.create(
            args.input,
            output=output,
            log_dir=log_dir,
            log_level=config.log_level,
        ) as workspace:
            results = run_pipeline(workspace, config)

        merged = results.get("merge")
        if merged:
            console.info(f"Wrote {merged['output']}")
        return EXIT_OK

    except PdfIronError as e:
        console.error(str(e), error=e.__class__.__name__)
        return EXIT_ERROR

    except KeyboardInterrupt:
        console.error("Interrupted")
        return EXIT_INTERRUPTED

    finally:
        console.close()
