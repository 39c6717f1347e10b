STAGE_DEFINITIONS = [
    {'name': 'rasterize', 'class': 'pdfiron.pipeline.rasterize.RasterizeStage'},
    {'name': 'cleanup', 'class': 'pdfiron.pipeline.cleanup.CleanupStage'},
    {'name': 'normalize', 'class': 'pdfiron.pipeline.normalize.NormalizeStage'},
    {'name': 'ocr', 'class': 'pdfiron.pipeline.ocr.OcrStage'},
    {'name': 'merge', 'class': 'pdfiron.pipeline.merge.MergeStage'},
]

STAGE_NAMES = [s['name'] for s in STAGE_DEFINITIONS]


def get_stage_class(stage_name: str):
    for stage_def in STAGE_DEFINITIONS:
        if stage_def['name'] == stage_name:
            module_path, class_name = stage_def['class'].rsplit('.', 1)
            module = __import__(module_path, fromlist=[class_name])
            return getattr(module, class_name)

    raise ValueError(f"Unknown stage: {stage_name}")


def get_stage_instance(workspace, config, stage_name: str):
    stage_class = get_stage_class(stage_name)
    return stage_class(workspace, config)


def get_stages(workspace, config):
    """All stages in pipeline order."""
    return [
        get_stage_instance(workspace, config, stage_def['name'])
        for stage_def in STAGE_DEFINITIONS
    ]
