"""
GridImageCodec - Model Canvas and Image Files
=============================================

Fits layer images onto the fixed 256x256 canvas the inference model
expects, maps model output back to grid resolution and reads/writes
PNG samples. Scaling is nearest neighbour throughout so hard colour
boundaries survive.
"""

from pathlib import Path
from typing import Tuple, Union

from PIL import Image

from voxblob.core.palette import GREY, PaletteColor

CANVAS_SIZE = 256

ColorLike = Union[PaletteColor, Tuple[int, ...]]


def _rgba(color: ColorLike) -> Tuple[int, int, int, int]:
    if isinstance(color, PaletteColor):
        return color.to_tuple()
    if len(color) == 3:
        return (color[0], color[1], color[2], 255)
    return tuple(color)


def fit_box(width: int, height: int, canvas: int = CANVAS_SIZE) -> Tuple[int, int, int, int]:
    """
    Region of the canvas covered by an image of the given size.

    The image is scaled uniformly so that its larger side spans the canvas
    and anchored at the top-left corner.

    Returns:
        (left, upper, right, lower) box
    """
    scale = canvas / max(width, height)
    return (0, 0, max(1, round(width * scale)), max(1, round(height * scale)))


def scale_point(image: Image.Image, width: int, height: int) -> Image.Image:
    """Nearest neighbour resize, no smoothing."""
    if image.size == (width, height):
        return image.copy()
    return image.resize((width, height), resample=Image.Resampling.NEAREST)


def resize_256(image: Image.Image, fill_color: ColorLike = GREY) -> Image.Image:
    """
    Place an image on a 256x256 canvas.

    Args:
        image: Source image (any size)
        fill_color: Colour of the canvas area the image does not cover

    Returns:
        256x256 RGBA image
    """
    canvas = Image.new('RGBA', (CANVAS_SIZE, CANVAS_SIZE), _rgba(fill_color))
    box = fit_box(*image.size)
    scaled = scale_point(image.convert('RGBA'), box[2] - box[0], box[3] - box[1])
    canvas.paste(scaled, box[:2])
    return canvas


class GridImageCodec:
    """
    Grid image <-> model canvas conversion.

    Model input is always a 256x256 RGB image; model output is expected in
    the same format.
    """

    def __init__(self, fill_color: ColorLike = GREY):
        self.fill_color = fill_color

    def to_model_input(self, image: Image.Image) -> Image.Image:
        """
        Prepare a layer image for the model.

        Transparent cells are stored grey with alpha 0, so dropping the
        alpha channel leaves them at the inactive colour.
        """
        return resize_256(image, self.fill_color).convert('RGB')

    def from_model_output(self, image: Image.Image, size: Tuple[int, int]) -> Image.Image:
        """
        Bring a model canvas back to grid layer resolution.

        Args:
            image: 256x256 model output
            size: (size_x, size_z) of the grid layer

        Raises:
            ValueError: If the image is not a 256x256 canvas
        """
        if image.size != (CANVAS_SIZE, CANVAS_SIZE):
            raise ValueError(f"Expected a {CANVAS_SIZE}x{CANVAS_SIZE} image, got {image.size}")

        box = fit_box(*size)
        if box != (0, 0, CANVAS_SIZE, CANVAS_SIZE):
            image = image.crop(box)
        return scale_point(image.convert('RGB'), *size)


def save_image(image: Image.Image, filepath: Union[str, Path]) -> Path:
    """
    Save an image as PNG.

    Args:
        image: Image to save
        filepath: Target path; '.png' is appended when no suffix is given

    Returns:
        Path that was written
    """
    path = Path(filepath)
    if not path.suffix:
        path = path.with_suffix('.png')
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path)
    return path


def load_image(filepath: Union[str, Path]) -> Image.Image:
    """Load an image file fully into memory."""
    with Image.open(filepath) as img:
        img.load()
        return img.copy()
