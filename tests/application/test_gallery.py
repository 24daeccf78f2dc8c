import numpy as np

from printcrop.application.gallery import CropGallery
from printcrop.core.export import ExportedCrop


def _crop(value=0):
    return ExportedCrop.from_pixels(np.full((3, 2, 3), value, dtype=np.uint8))


def test_items_keep_export_order():
    gallery = CropGallery()
    first, second = _crop(1), _crop(2)
    gallery.add(first)
    gallery.add(second)
    assert [item.id for item in gallery.items()] == [first.id, second.id]
    assert gallery.get(first.id) is first
    assert gallery.get("missing") is None


def test_duplicate_selection():
    gallery = CropGallery()
    first, second = _crop(1), _crop(2)
    gallery.add(first)
    gallery.add(second)

    copies = gallery.duplicate([first.id, "missing"])

    assert len(copies) == 1
    assert copies[0].id not in (first.id, second.id)
    assert copies[0].pixels is first.pixels
    assert len(gallery) == 3
    assert gallery.items()[-1] is copies[0]
    assert gallery.items()[:2] == [first, second]


def test_delete_selection():
    gallery = CropGallery()
    crops = [_crop(i) for i in range(3)]
    for crop in crops:
        gallery.add(crop)

    removed = gallery.delete([crops[0].id, crops[2].id])

    assert removed == 2
    assert [item.id for item in gallery.items()] == [crops[1].id]
    gallery.clear()
    assert len(gallery) == 0
