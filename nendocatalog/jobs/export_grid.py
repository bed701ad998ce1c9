"""
Export a catalog grid image.

Renders one export preset for the stored collections and writes the PNG
to the export directory.

    python -m nendocatalog.jobs.export_grid --preset owned_catalog --search miku
    python -m nendocatalog.jobs.export_grid --hair-color Blue --hair-color Pink --part Leek
"""

import argparse
import asyncio
import logging
from pathlib import Path

from nendocatalog.config import settings
from nendocatalog.db.database import async_session_factory, init_db
from nendocatalog.models.criteria import DisplayMode, FilterCriteria
from nendocatalog.services.catalog_service import CatalogService
from nendocatalog.services.export_presets import ExportPresetName

logger = logging.getLogger(__name__)


async def run_export(
    preset: ExportPresetName,
    output_dir: Path,
    criteria: FilterCriteria,
    mode: DisplayMode | None = None,
) -> Path:
    """Render a preset with the stored collections and write it to output_dir."""
    await init_db()
    service = await CatalogService.load(settings, async_session_factory)
    service.set_criteria(criteria)
    if mode is not None:
        service.state = service.state.with_mode(mode)

    logger.info("Exporting %s grid...", preset.value)
    try:
        result = await service.export(preset)
    except Exception as e:
        logger.error("Failed to export grid: %s", e)
        raise

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.filename
    path.write_bytes(result.data)
    logger.info("Wrote %d figures to %s", result.item_count, path)
    return path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a catalog grid image")
    parser.add_argument(
        "--preset",
        choices=[p.value for p in ExportPresetName],
        default=ExportPresetName.ALL.value,
    )
    parser.add_argument("--output", type=Path, default=settings.export_dir)
    parser.add_argument("--mode", choices=[m.value for m in DisplayMode], default=None)
    parser.add_argument("--search", default="")
    parser.add_argument("--fandom", default="")
    parser.add_argument("--gender", default="")
    parser.add_argument("--hair-color", dest="hair_colors", action="append", help="Repeatable")
    parser.add_argument(
        "--clothes-color", dest="clothes_colors", action="append", help="Repeatable"
    )
    parser.add_argument("--part", dest="parts", action="append", help="Repeatable; all must match")
    parser.add_argument("--id-min", default=None)
    parser.add_argument("--id-max", default=None)
    return parser.parse_args(argv)


def criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria.build(
        search=args.search,
        fandom=args.fandom,
        gender=args.gender,
        hair_colors=args.hair_colors,
        clothes_colors=args.clothes_colors,
        parts=args.parts,
        id_min=args.id_min,
        id_max=args.id_max,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)
    mode = DisplayMode(args.mode) if args.mode else None
    criteria = criteria_from_args(args)
    asyncio.run(run_export(ExportPresetName(args.preset), args.output, criteria, mode))


if __name__ == "__main__":
    main()
