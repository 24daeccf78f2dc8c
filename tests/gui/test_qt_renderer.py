import numpy as np

from printcrop.core import session
from printcrop.core.compositor import Compositor
from printcrop.core.raster import ImageSource, PixelBox
from printcrop.core.renderer import Renderer
from printcrop.core.transform import ViewportTransform
from printcrop.gui import QtRenderer


def _solid(width, height, rgb):
    pixels = np.empty((height, width, 3), dtype=np.uint8)
    pixels[...] = rgb
    return ImageSource.from_array(pixels)


def test_qt_renderer_satisfies_protocol(qt_app):
    assert isinstance(QtRenderer(4, 4), Renderer)


def test_fill_and_read_back(qt_app):
    renderer = QtRenderer(7, 5)
    renderer.fill((10, 20, 30))
    pixels = renderer.get_pixels()
    assert pixels.shape == (5, 7, 4)
    assert np.all(pixels[..., :3] == (10, 20, 30))
    assert np.all(pixels[..., 3] == 255)


def test_draw_image_through_transform(qt_app):
    renderer = QtRenderer(30, 30)
    renderer.draw_image(_solid(10, 10, (255, 0, 0)), ViewportTransform(1.0, 5.0, 5.0))
    pixels = renderer.get_pixels()
    assert tuple(pixels[10, 10]) == (255, 0, 0, 255)
    assert tuple(pixels[0, 0]) == (255, 255, 255, 255)


def test_put_pixels_replaces_region(qt_app):
    renderer = QtRenderer(10, 10)
    patch = np.zeros((2, 3, 4), dtype=np.uint8)
    patch[..., 2] = 200
    patch[..., 3] = 255
    renderer.put_pixels(4, 4, patch)
    region = renderer.get_pixels(PixelBox(4, 4, 3, 2))
    assert np.all(region[..., :3] == (0, 0, 200))
    assert tuple(renderer.get_pixels()[0, 0, :3]) == (255, 255, 255)


def test_compositor_export_with_qt_renderer(qt_app):
    state = session.load_image(
        session.new_session(viewport_height_px=180), _solid(40, 60, (0, 0, 255))
    )
    exported = Compositor(renderer_factory=QtRenderer).render_export(state)
    assert exported.shape == (14, 11, 3)
    assert np.abs(exported.astype(int) - (0, 0, 255)).max() <= 1
