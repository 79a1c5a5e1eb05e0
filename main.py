#!/usr/bin/env python3
"""
lightpath - A Python CPU Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import sys
import time

from lightpath.camera import Camera
from lightpath.renderer import Renderer, RenderSettings, save_image
from lightpath.scenes import SCENES
from lightpath.scene_parser import SceneParseError, load_scene


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description='lightpath - A Python CPU Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene default --output render.png
  python main.py --width 800 --height 450 --samples 200 --seed 7 --output hd_render.png
  python main.py --scene-file scenes/bubble.yaml --output bubble.png
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=225, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--tile-size', type=int, default=16, help='Tile edge in pixels (default: 16)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible render')
    parser.add_argument('--vfov', type=float, default=90.0, help='Vertical field of view in degrees (default: 90)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='default', choices=sorted(SCENES),
                        help='Built-in scene to render (default: default)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='JSON or YAML scene description (overrides --scene and image flags)')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    print("=" * 60)
    print("lightpath Path Tracer")
    print("=" * 60)

    try:
        if args.scene_file:
            print(f"\nLoading scene file: {args.scene_file}")
            world, camera, settings = load_scene(args.scene_file)
        else:
            settings = RenderSettings(
                width=args.width,
                height=args.height,
                samples_per_pixel=args.samples,
                max_depth=args.depth,
                tile_size=args.tile_size,
                num_threads=args.threads,
                seed=args.seed
            )
            print(f"\nCreating scene: {args.scene}")
            world = SCENES[args.scene]()
            camera = Camera.from_vfov(args.vfov, aspect_ratio=settings.width / settings.height)
    except (SceneParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"  Objects in scene: {len(world)}")
    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Seed: {settings.seed if settings.seed is not None else 'random'}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    if elapsed > 0:
        print(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    print(f"\nSaving to: {args.output}")
    save_image(image, args.output)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
