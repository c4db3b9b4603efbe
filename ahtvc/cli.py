from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .graphiceq import load_curve, read_eq_text
from .logging_utils import get_logger, set_verbosity
from .pipeline import ConversionReport, convert_text, write_results
from .types import PipelineConfig

logger = get_logger(__name__)


def _odd_window(value: str) -> int:
    result = int(value)
    if result <= 1 or result % 2 == 0:
        raise argparse.ArgumentTypeError("размер окна должен быть нечётным целым числом больше 1")
    return result


def _positive_float(value: str) -> float:
    result = float(value)
    if result <= 0:
        raise argparse.ArgumentTypeError("значение должно быть положительным числом")
    return result


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        required=True,
        type=Path,
        metavar="PATH",
        help="Путь к файлу AutoEQ (GraphicEQ) с целью Harman",
    )


def _build_convert_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    convert_parser = subparsers.add_parser(
        "convert",
        help="Сконвертировать EQ Harman в EQ VDSF (две версии)",
        description="Сложение с кривой Harman -> VDSF, сглаживание ВЧ и нормализация без preamp.",
    )
    _add_input_argument(convert_parser)
    convert_parser.add_argument(
        "--output-dir",
        type=Path,
        metavar="DIR",
        help="Каталог для результатов (по умолчанию рядом с входным файлом)",
    )
    convert_parser.add_argument(
        "--device-name",
        metavar="NAME",
        help="Имя устройства для имён файлов (по умолчанию из имени входного файла)",
    )
    convert_parser.add_argument(
        "--correction",
        type=Path,
        metavar="PATH",
        help="Файл GraphicEQ с собственной кривой коррекции вместо встроенной",
    )
    convert_parser.add_argument(
        "--window",
        type=_odd_window,
        metavar="N",
        help="Размер окна скользящего среднего (по умолчанию 5)",
    )
    convert_parser.add_argument(
        "--smooth-start",
        type=_positive_float,
        metavar="HZ",
        help="Частота начала сглаживания (по умолчанию 8000 Гц)",
    )
    convert_parser.add_argument(
        "--json",
        type=Path,
        metavar="OUT.json",
        help="Сохранить отчёт в JSON",
    )
    convert_parser.add_argument(
        "--print",
        dest="print_curves",
        action="store_true",
        help="Вывести обе строки GraphicEQ в консоль",
    )


def _build_inspect_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Показать сводку по файлу GraphicEQ",
        description="Разбирает файл и выводит число точек, диапазон частот и усилений.",
    )
    _add_input_argument(inspect_parser)


def build_parser() -> argparse.ArgumentParser:
    """Создает корневой парсер CLI."""

    parser = argparse.ArgumentParser(
        prog="ahtvc",
        description="AutoEQ Harman to VDSF Converter (консольные команды).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Показать версию",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Включить подробный вывод (уровень DEBUG)",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Показывать только предупреждения и ошибки (уровень WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    _build_convert_parser(subparsers)
    _build_inspect_parser(subparsers)

    return parser


def _build_config(args: argparse.Namespace) -> PipelineConfig:
    config = PipelineConfig.default()
    correction = load_curve(args.correction) if args.correction else None
    return config.with_overrides(
        correction=correction,
        window_size=args.window,
        smooth_start_freq=args.smooth_start,
    )


def _format_report(report: ConversionReport, written: List[Path]) -> str:
    lines: List[str] = [
        f"Device: {report.device}",
        f"Input points: {report.input_points}",
        f"Output points: {len(report.outputs.primary.curve)}",
        f"Warnings: {report.outputs.diagnostics.count()}",
    ]
    lines.extend(f"Output file: {path}" for path in written)
    return "\n".join(lines)


def _write_json(path: Path, report: Dict[str, Any]) -> None:
    import json

    with path.open("w", encoding="utf-8") as handle:
        json.dump(report, handle, ensure_ascii=False, indent=2)


def run_convert(args: argparse.Namespace) -> int:
    """Запускает команду convert."""

    logger.info("Команда convert")
    input_path: Path = args.input
    report = convert_text(
        read_eq_text(input_path),
        source_filename=input_path.name,
        config=_build_config(args),
        device=args.device_name,
    )
    output_dir = args.output_dir if args.output_dir is not None else input_path.parent
    written = write_results(report, output_dir)

    print(_format_report(report, written))
    if args.print_curves:
        print(report.outputs.primary.text)
        print(report.outputs.secondary.text)
    if args.json:
        _write_json(args.json, report.to_dict())
    return 0


def run_inspect(args: argparse.Namespace) -> int:
    """Запускает команду inspect."""

    logger.info("Просмотр файла: %s", args.input)
    curve = load_curve(args.input)
    frequencies = sorted(curve)
    gains = [curve[freq] for freq in frequencies]
    print(f"Points: {len(curve)}")
    print(f"Frequency range: {frequencies[0]}-{frequencies[-1]} Hz")
    print(f"Gain range: {min(gains):.1f}..{max(gains):.1f} dB")
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "convert":
        return run_convert(args)
    if args.command == "inspect":
        return run_inspect(args)
    return 1


def main(argv: Optional[List[str]] = None) -> None:
    """Точка входа CLI."""

    parser = build_parser()
    args = parser.parse_args(argv)
    level = set_verbosity(verbose=args.verbose, quiet=args.quiet)
    logger.debug("Уровень логирования: %s", logging.getLevelName(level))

    if not args.command:
        parser.print_help()
        return

    try:
        exit_code = _dispatch(args)
    except Exception as exc:  # noqa: BLE001
        parser.error(str(exc))
        return

    if exit_code != 0:
        parser.exit(exit_code)


if __name__ == "__main__":
    main()
