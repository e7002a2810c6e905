import argparse
import logging
from data_classes.data_classes import Config
from pipeline.compatibility import compatible_pairs
from pipeline.reporter import summarize
from pipeline.sweep import SweepController
from pipeline.timer import timeit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Keypoint detector / descriptor benchmark sweep")
    parser.add_argument("--config", type=str, default=None, help="JSON config file (flags below override it)")
    parser.add_argument("--images", type=str, default=None, help="Image base path")
    parser.add_argument("--prefix", type=str, default=None, help="Filename prefix before the frame index")
    parser.add_argument("--ext", type=str, default=None, help="Image file extension")
    parser.add_argument("--start", type=int, default=None, help="First frame index")
    parser.add_argument("--end", type=int, default=None, help="Last frame index (inclusive)")
    parser.add_argument("--fill_width", type=int, default=None, help="Zero-padded width of the frame index")
    parser.add_argument("--detectors", type=str, default=None, help="Comma-separated detector names")
    parser.add_argument("--descriptors", type=str, default=None, help="Comma-separated descriptor names")
    parser.add_argument("--matcher", type=str, default=None, help="MAT_BF, MAT_FLANN or MAT_KORNIA")
    parser.add_argument("--selector", type=str, default=None, help="SEL_NN or SEL_KNN")
    parser.add_argument("--max_keypoints", type=int, default=None, help="Keep only the N strongest keypoints")
    parser.add_argument("--no_roi", action="store_true", help="Keep keypoints outside the region of interest")
    parser.add_argument("--output", type=str, default=None, help="Output CSV path")
    parser.add_argument("--vis_dir", type=str, default=None, help="Write match images to this directory")
    parser.add_argument("--device", type=str, default=None, help="Device for MAT_KORNIA (cuda/cpu)")
    parser.add_argument("--verbose", action="store_true", help="Log every pipeline stage")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    overrides = {
        'img_base_path': args.images,
        'img_prefix': args.prefix,
        'img_file_type': args.ext,
        'img_start_index': args.start,
        'img_end_index': args.end,
        'img_fill_width': args.fill_width,
        'detectors': tuple(args.detectors.split(',')) if args.detectors else None,
        'descriptors': tuple(args.descriptors.split(',')) if args.descriptors else None,
        'matcher_type': args.matcher,
        'selector_type': args.selector,
        'max_keypoints': args.max_keypoints,
        'focus_on_roi': False if args.no_roi else None,
        'output_path': args.output,
        'vis_dir': args.vis_dir,
        'device': args.device,
    }
    if args.config:
        return Config.from_json(args.config, **overrides)
    return Config(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
    )

    config = config_from_args(args)
    controller = SweepController(config)
    pairs = compatible_pairs(config.detectors, config.descriptors)

    print("=" * 60)
    print(f"Sweeping {len(pairs)} detector/descriptor pairs over {len(controller.loader)} frames")
    print(f"  Matcher: {config.matcher_type} / {config.selector_type}")
    print("=" * 60)

    with timeit("Sweep"):
        summary = controller.run()

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    if summary.rows_written:
        print(summarize(summary.output_path).to_string(index=False, float_format=lambda v: f"{v:.3f}"))
    for result in summary.results:
        if result.failed:
            print(f"  FAILED {result.detector}/{result.descriptor} after {len(result.records)} frame(s): {result.error}")

    print(f"\nResults saved to '{summary.output_path}'")
    print(f"Errors : {summary.error_count}")


if __name__ == '__main__':
    main()
