from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPainter, QWheelEvent
from PyQt5.QtWidgets import QGraphicsView


class CustomGraphicsView(QGraphicsView):
    """
    Shared canvas for every structure view:
    - normal wheel: vertical panning only
    - Ctrl + wheel: zoom by zoom_step, clamped to [min_zoom, max_zoom]
    """

    zoom_step = 1.1
    min_zoom = 0.05
    max_zoom = 4.0

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHints(self.renderHints() | QPainter.Antialiasing | QPainter.TextAntialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)

    @property
    def zoom(self) -> float:
        return self.transform().m11()

    def wheelEvent(self, event: QWheelEvent):
        delta = event.angleDelta().y()
        if event.modifiers() & Qt.ControlModifier:
            factor = self.zoom_step if delta > 0 else 1 / self.zoom_step
            target = self.zoom * factor
            if self.min_zoom <= target <= self.max_zoom:
                self.scale(factor, factor)
        else:
            self.translate(0, -delta * 0.2)
        event.accept()
