#!/usr/bin/env python3
"""
VoxBlob - Voxel Blob Generator
==============================

Main entry point for the VoxBlob command line tool.
Generates training samples of random blobs or rectangles, and runs a
pix2pix generator over a grid layer by layer.

Usage:
    python main.py blobs [options]
    python main.py rectangles [options]
    python main.py predict --model generator.pt [options]
"""

import sys
import argparse
from pathlib import Path

# Add the project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def parse_size(text: str):
    """Parse a 'WxHxD' grid size."""
    try:
        parts = text.lower().split('x')
        size = (int(parts[0]), int(parts[1]), int(parts[2]))
    except (ValueError, IndexError):
        raise argparse.ArgumentTypeError(f"Invalid grid size: {text} (expected WxHxD)")
    if len(parts) != 3 or min(size) < 1:
        raise argparse.ArgumentTypeError(f"Invalid grid size: {text} (expected WxHxD)")
    return size


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='VoxBlob - Voxel Blob Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s blobs --samples 500                 Save 500 blob samples to Output/
  %(prog)s rectangles --output Rects           Save rectangle samples to Rects/
  %(prog)s predict --model gen.pt --all-layers Run a generator on every layer
        """
    )

    parser.add_argument(
        '--size',
        type=parse_size,
        default=(64, 10, 64),
        help='Grid size (default: 64x10x64)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=666,
        help='Random seed (default: 666)'
    )

    parser.add_argument(
        '--output',
        type=str,
        default='Output',
        help='Output folder (default: Output)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode'
    )

    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s 1.0.0'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    blobs = subparsers.add_parser('blobs', help='Generate random blob samples')
    blobs.add_argument('--samples', type=int, default=500)
    blobs.add_argument('--min-amt', type=int, default=2)
    blobs.add_argument('--max-amt', type=int, default=4)
    blobs.add_argument('--min-radius', type=int, default=15)
    blobs.add_argument('--max-radius', type=int, default=25)

    rectangles = subparsers.add_parser('rectangles', help='Generate random rectangle samples')
    rectangles.add_argument('--samples', type=int, default=500)
    rectangles.add_argument('--min-amt', type=int, default=2)
    rectangles.add_argument('--max-amt', type=int, default=4)
    rectangles.add_argument('--min-width', type=int, default=4)
    rectangles.add_argument('--max-width', type=int, default=16)
    rectangles.add_argument('--min-depth', type=int, default=4)
    rectangles.add_argument('--max-depth', type=int, default=16)

    predict = subparsers.add_parser('predict', help='Run a TorchScript generator over the grid')
    predict.add_argument('--model', type=str, required=True, help='TorchScript generator file')
    predict.add_argument('--input', type=str, help='Image to load into layer 0 (default: random blobs)')
    predict.add_argument('--all-layers', action='store_true', help='Run on every layer')
    predict.add_argument('--device', type=str, default='cpu')

    return parser.parse_args(argv)


def generate(args) -> int:
    """Generate a sample dataset."""
    from voxblob.core import DatasetBuilder, GenerationConfig, ShapeGenerator, VoxelGrid
    import numpy as np

    rng = np.random.default_rng(args.seed)
    grid = VoxelGrid(size=args.size, rng=rng)
    generator = ShapeGenerator(grid, rng)

    if args.command == 'blobs':
        config = GenerationConfig(
            sample_size=args.samples, min_amt=args.min_amt, max_amt=args.max_amt,
            min_radius=args.min_radius, max_radius=args.max_radius,
            output_folder=args.output
        )
    else:
        config = GenerationConfig(
            sample_size=args.samples, min_amt=args.min_amt, max_amt=args.max_amt,
            min_width=args.min_width, max_width=args.max_width,
            min_depth=args.min_depth, max_depth=args.max_depth,
            output_folder=args.output
        )

    builder = DatasetBuilder.from_config(grid, generator, config, verbose=True)
    paths = builder.run(config, shapes=args.command)
    print(f"Saved {len(paths)} images to {Path(args.output).resolve()}")
    return 0


def predict(args) -> int:
    """Run the model over a grid and save every layer image."""
    from voxblob.core import Environment, InferenceError, TorchScriptModel
    from voxblob.formats import CANVAS_SIZE, GridImageCodec, load_image, save_image, scale_point

    model = TorchScriptModel(args.model, device=args.device)
    env = Environment(model, size=args.size, seed=args.seed, verbose=args.debug)

    if args.input:
        image = load_image(args.input)
        layer_size = (env.grid.width, env.grid.depth)
        if image.size == (CANVAS_SIZE, CANVAS_SIZE):
            # Saved samples only cover the top-left box of the canvas
            image = GridImageCodec().from_model_output(image, layer_size)
        else:
            image = scale_point(image, *layer_size)
        env.grid.set_states_from_image(image)
    else:
        env.generator.create_random_blobs(3, 15, 25)

    try:
        layers = env.controller.predict_and_update(all_layers=args.all_layers)
    except InferenceError as e:
        print(f"Error: {e}")
        return 1

    for layer in range(layers):
        save_image(env.grid.image_from_grid(layer=layer), Path(args.output) / f"Layer_{layer}")
    print(f"Predicted {layers} layer(s), images saved to {Path(args.output).resolve()}")
    return 0


def main(argv=None):
    """Main application entry point."""
    args = parse_arguments(argv)

    if args.debug:
        print(f"Arguments: {vars(args)}")

    if args.command in ('blobs', 'rectangles'):
        return generate(args)
    return predict(args)


if __name__ == "__main__":
    sys.exit(main())
