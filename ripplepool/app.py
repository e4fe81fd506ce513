from __future__ import annotations

import logging
import sys

from PIL import Image
from PySide6.QtCore import QTimer
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QApplication, QLabel, QSizePolicy, QVBoxLayout, QWidget

from ripplepool.core.scene import SceneConfig, SceneDirector

logger = logging.getLogger(__name__)


class PoolWindow(QWidget):
    def __init__(self, config: SceneConfig | None = None, fps: int = 30):
        super().__init__()
        config = config or SceneConfig()
        self.setWindowTitle("Pool Sketch")
        self.resize(config.width, config.height)
        self.setMinimumSize(200, 200)

        self.scene = SceneDirector(config)
        self._pending_size = None

        self.view = QLabel(self)
        self.view.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.view)

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.on_tick)
        self.timer.start(max(1, int(1000 / max(1, fps))))

    def resizeEvent(self, event):
        # applied at the start of the next tick, never mid-frame
        size = event.size()
        self._pending_size = (size.width(), size.height())
        super().resizeEvent(event)

    def on_tick(self):
        pending, self._pending_size = self._pending_size, None
        if pending is not None and pending != (self.scene.width, self.scene.height):
            self.scene.on_resize(*pending)
        surface = self.scene.on_tick()
        self.view.setPixmap(QPixmap.fromImage(self.qimage_from_pil(surface.image)))

    @staticmethod
    def qimage_from_pil(pil_img: Image.Image) -> QImage:
        rgb = pil_img.convert('RGBA')
        data = rgb.tobytes('raw', 'RGBA')
        qimg = QImage(data, rgb.width, rgb.height, QImage.Format_RGBA8888)
        # detach from the python bytes object
        return qimg.copy()


def main(config: SceneConfig | None = None, fps: int = 30) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    window = PoolWindow(config, fps)
    window.show()
    logger.info("desktop window started at %d fps", fps)
    return app.exec()
