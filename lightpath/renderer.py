"""
Renderer module - drives the path tracer over the whole image.

Implements:
- Multi-sample anti-aliasing with jittered sample positions
- Multi-threaded tile-based rendering
- Independent, reproducible random streams per tile
- Gamma-2 color mapping to 8-bit output
"""

from __future__ import annotations
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Callable, Tuple
import numpy as np
from PIL import Image as PILImage

from .vec3 import Color
from .camera import Camera
from .scene import Scene
from .integrator import ray_color

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    tile_size: int = 16
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None  # None = fresh entropy on every render
    background: Optional[Color] = None  # None = sky gradient

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene and return the linear image as a numpy array.

        Scene and camera are only read, so every tile shares them.

        Args:
            scene: The scene to render
            camera: The camera to render from

        Returns:
            Linear image of shape (height, width, 3), row 0 at the top
        """
        width = self.settings.width
        height = self.settings.height

        image = np.zeros((height, width, 3), dtype=np.float64)

        tiles = self._generate_tiles(width, height)
        seeds = np.random.SeedSequence(self.settings.seed).spawn(len(tiles))
        total_tiles = len(tiles)
        completed_tiles = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        def render_tile(tile: Tile, seed: np.random.SeedSequence) -> Tuple[Tile, np.ndarray]:
            """Render a single tile with its own random stream."""
            rng = np.random.default_rng(seed)
            x0, y0, x1, y1 = tile
            tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

            for y in range(y0, y1):
                for x in range(x0, x1):
                    tile_image[y - y0, x - x0] = self.render_pixel(scene, camera, x, y, rng).to_array()

            with progress_lock:
                completed_tiles[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_tiles[0] / total_tiles)

            return tile, tile_image

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles, seeds))
        else:
            results = [render_tile(tile, seed) for tile, seed in zip(tiles, seeds)]

        # Fork-join: assemble only after every tile has finished
        for tile, tile_image in results:
            x0, y0, x1, y1 = tile
            image[y0:y1, x0:x1] = tile_image

        return image

    def render_pixel(self, scene: Scene, camera: Camera, x: int, y: int, rng: np.random.Generator) -> Color:
        """Average the jittered samples of one pixel.

        Args:
            x: Column, 0 at the left edge
            y: Row, 0 at the top edge

        Returns:
            Mean linear color over samples_per_pixel paths
        """
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel

        # The viewport's v = 0 is the bottom edge, image rows start at the top
        u_scale = max(width - 1, 1)
        v_scale = max(height - 1, 1)
        row = height - 1 - y

        pixel_color = Color(0, 0, 0)
        for _ in range(samples):
            u = (x + rng.random()) / u_scale
            v = (row + rng.random()) / v_scale
            ray = camera.get_ray(u, v)
            pixel_color = pixel_color + ray_color(
                ray, scene, self.settings.max_depth, rng, self.settings.background
            )

        return pixel_color / samples

    def _generate_tiles(self, width: int, height: int) -> list[Tile]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles


def to_ldr(hdr_image: np.ndarray) -> np.ndarray:
    """Convert a linear image to 8-bit display values.

    Each channel is clamped to [0, 1], gamma corrected with a square root
    (gamma 2.0) and scaled to [0, 255].

    Args:
        hdr_image: Linear image array (float)

    Returns:
        Display image as uint8 array of the same shape
    """
    corrected = np.sqrt(np.clip(hdr_image, 0.0, 1.0))
    return (corrected * 255.0).astype(np.uint8)


def save_image(image: np.ndarray, filename: str) -> None:
    """Save image to file.

    Args:
        image: Image array, linear float or already converted uint8
        filename: Output filename (extension determines format)
    """
    if image.dtype != np.uint8:
        image = to_ldr(image)

    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    PILImage.fromarray(image).save(path)
