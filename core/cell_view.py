from typing import Dict, List

from PyQt5.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPainterPath, QPen, QTransform
from PyQt5.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsPathItem,
    QGraphicsSimpleTextItem,
    QMenu,
)

from core.base_view import BaseStructureView


class CellRowView(BaseStructureView):
    """
    一行槽位的通用视图：循环队列、可增长栈和单链表共用。

    snapshot 格式::

        {
            "slots": [{"id": .., "value": ..} 或 None, ...],
            "markers": {slot 下标: "front" / "rear" / "top" / "head", ...},
            "linked": bool,   # 为 True 时在相邻单元之间画箭头
        }
    """

    clearAllRequested = pyqtSignal()
    removeRequested = pyqtSignal(int)

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.scene.installEventFilter(self)

        self.cells: Dict[int, CellItem] = {}
        self.slot_items: List[SlotItem] = []
        self.labels: List[QGraphicsSimpleTextItem] = []
        self.arrows: List[QGraphicsPathItem] = []
        self.base_origin = QPointF(-360, -CellItem.height / 2)
        self._last_snapshot = {"slots": [], "markers": {}, "linked": False}

    # ---------- Public API ----------

    def reset(self):
        self.stop_all_animations()
        self.scene.clear()
        self.cells.clear()
        self.slot_items.clear()
        self.labels.clear()
        self.arrows.clear()
        self._last_snapshot = {"slots": [], "markers": {}, "linked": False}

    def show_snapshot(self, snapshot):
        self._finalize_snapshot(snapshot)

    def slot_of(self, cell_id) -> int:
        for idx, cell in enumerate(self._last_snapshot["slots"]):
            if cell and cell["id"] == cell_id:
                return idx
        return -1

    def animate_insert(self, snapshot, cell_id):
        index = self._index_in(snapshot, cell_id)
        if index < 0:
            self._finalize_snapshot(snapshot)
            return

        shift = self._animate_shift(snapshot, skip_id=cell_id)
        self._sync_slots(len(snapshot["slots"]))
        info = snapshot["slots"][index]
        cell = self.cells.get(cell_id) or self._create_cell_item(cell_id, info["value"])
        cell.setOpacity(0.0)
        cell.setPos(self._spawn_position(index))
        drop = self.anim.move_item(cell, self.slot_position(index), duration=420)
        fade = self.anim.fade_item(cell, 0.0, 1.0, duration=420)
        highlight = self.anim.flash_brush(
            setter=cell.setFillColor,
            start_color=cell.fillColor,
            end_color=QColor("#ffd54f"),
            duration=360,
            loops=1,
        )

        sequence = self.anim.sequential()
        if shift:
            sequence.addAnimation(shift)
        sequence.addAnimation(self.anim.parallel(drop, fade))
        sequence.addAnimation(highlight)
        self._track_animation(sequence, finalizer=lambda: self._finalize_snapshot(snapshot))

    def animate_remove(self, snapshot, removed_id):
        cell = self.cells.get(removed_id)
        if cell is None:
            self._finalize_snapshot(snapshot)
            return

        blink = self.anim.flash_brush(
            setter=cell.setFillColor,
            start_color=cell.fillColor,
            end_color=QColor("#ff7043"),
            duration=320,
            loops=2,
        )
        lift = self.anim.move_item(cell, cell.pos() + QPointF(0, -(CellItem.height + 110)), duration=360)
        fade = self.anim.fade_item(cell, 1.0, 0.0, duration=360)

        sequence = self.anim.sequential(blink, self.anim.parallel(lift, fade))
        shift = self._animate_shift(snapshot, skip_id=removed_id)
        if shift:
            sequence.addAnimation(shift)
        self._track_animation(sequence, finalizer=lambda: self._finalize_snapshot(snapshot))

    def animate_highlight(self, snapshot, cell_id, color="#4dd0e1"):
        cell = self.cells.get(cell_id)
        if cell is None:
            self._finalize_snapshot(snapshot)
            return
        pulse = self.anim.flash_brush(
            setter=cell.setFillColor,
            start_color=cell.fillColor,
            end_color=QColor(color),
            duration=360,
            loops=2,
        )
        self._track_animation(pulse, finalizer=lambda: self._finalize_snapshot(snapshot))

    # ---------- Layout ----------

    def slot_position(self, index: int) -> QPointF:
        step = CellItem.width + (CellItem.link_gap if self._last_snapshot.get("linked") else 0)
        return QPointF(self.base_origin.x() + index * step, self.base_origin.y())

    def _spawn_position(self, index: int) -> QPointF:
        target = self.slot_position(index)
        return QPointF(target.x(), target.y() - (CellItem.height + 110))

    # ---------- Internal helpers ----------

    @staticmethod
    def _index_in(snapshot, cell_id) -> int:
        for idx, cell in enumerate(snapshot["slots"]):
            if cell and cell["id"] == cell_id:
                return idx
        return -1

    def _animate_shift(self, snapshot, skip_id=None):
        self._last_snapshot = dict(self._last_snapshot, linked=snapshot.get("linked", False))
        motions = []
        for idx, info in enumerate(snapshot["slots"]):
            if not info or info["id"] == skip_id:
                continue
            cell = self.cells.get(info["id"])
            if cell and cell.pos() != self.slot_position(idx):
                motions.append(self.anim.move_item(cell, self.slot_position(idx), duration=360))
        if not motions:
            return None
        return self.anim.parallel(*motions)

    def _create_cell_item(self, cell_id, value):
        cell = CellItem(cell_id, value)
        cell.contextRemove.connect(self.removeRequested.emit)
        self.scene.addItem(cell)
        self.cells[cell_id] = cell
        return cell

    def _finalize_snapshot(self, snapshot):
        self._last_snapshot = snapshot
        keep_ids = {info["id"] for info in snapshot["slots"] if info}
        for cell_id in list(self.cells.keys()):
            if cell_id not in keep_ids:
                item = self.cells.pop(cell_id)
                if item.scene():
                    self.scene.removeItem(item)

        for idx, info in enumerate(snapshot["slots"]):
            if not info:
                continue
            item = self.cells.get(info["id"]) or self._create_cell_item(info["id"], info["value"])
            item.setOpacity(1.0)
            item.set_value(info["value"])
            item.setPos(self.slot_position(idx))

        self._sync_slots(len(snapshot["slots"]))
        self._update_labels(snapshot)
        self._rebuild_arrows(snapshot)
        self.auto_fit_view(padding=80)

    def _sync_slots(self, count: int):
        while len(self.slot_items) > count:
            slot = self.slot_items.pop()
            if slot.scene():
                self.scene.removeItem(slot)
        while len(self.slot_items) < count:
            slot = SlotItem()
            slot.setZValue(-1)
            self.scene.addItem(slot)
            self.slot_items.append(slot)
        for idx, slot in enumerate(self.slot_items):
            slot.setPos(self.slot_position(idx))

    def _update_labels(self, snapshot):
        for label in self.labels:
            if label.scene():
                self.scene.removeItem(label)
        self.labels.clear()

        markers = snapshot.get("markers", {})
        for idx in range(len(snapshot["slots"])):
            text = str(idx)
            if idx in markers:
                text += "\n" + markers[idx]
            label = QGraphicsSimpleTextItem(text)
            label.setBrush(QColor("#90a4ae"))
            font = label.font()
            font.setPointSize(12)
            label.setFont(font)
            self.scene.addItem(label)
            slot = self.slot_position(idx)
            rect = label.boundingRect()
            label.setPos(slot.x() + CellItem.width / 2 - rect.width() / 2, slot.y() + CellItem.height + 8)
            self.labels.append(label)

    def _rebuild_arrows(self, snapshot):
        for arrow in self.arrows:
            if arrow.scene():
                self.scene.removeItem(arrow)
        self.arrows.clear()
        if not snapshot.get("linked"):
            return

        pen = QPen(QColor("#9e9e9e"), 2)
        for idx in range(len(snapshot["slots"]) - 1):
            start = self.slot_position(idx) + QPointF(CellItem.width, CellItem.height / 2)
            end = self.slot_position(idx + 1) + QPointF(0, CellItem.height / 2)
            path = QPainterPath(start)
            path.lineTo(end)
            path.moveTo(end)
            path.lineTo(end + QPointF(-9, -6))
            path.moveTo(end)
            path.lineTo(end + QPointF(-9, 6))
            arrow = QGraphicsPathItem(path)
            arrow.setPen(pen)
            arrow.setZValue(1)
            self.scene.addItem(arrow)
            self.arrows.append(arrow)

    def _show_background_menu(self, screen_pos):
        if isinstance(screen_pos, QPointF):
            screen_pos = screen_pos.toPoint()
        menu = QMenu()
        clear_action = menu.addAction("Clear")
        chosen = menu.exec_(screen_pos)
        if chosen == clear_action:
            self.clearAllRequested.emit()

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            item = self.scene.itemAt(event.scenePos(), QTransform())
            if item is None or isinstance(item, SlotItem):
                self._show_background_menu(event.screenPos())
                event.accept()
                return True
        return super().eventFilter(watched, event)


class CellItem(QGraphicsObject):
    contextRemove = pyqtSignal(int)

    width = 96
    height = 64
    link_gap = 40

    def __init__(self, cell_id, value):
        super().__init__()
        self.cell_id = cell_id
        self._value = str(value)
        self.fillColor = QColor("#b8b8d6")
        self.strokeColor = QColor("#4a4a52")
        self.textColor = QColor("#1f1f24")
        self.setZValue(2)
        self.setAcceptedMouseButtons(Qt.LeftButton | Qt.RightButton)
        self.setCacheMode(QGraphicsItem.DeviceCoordinateCache)

    @property
    def value_text(self) -> str:
        return self._value

    def boundingRect(self):
        return QRectF(0, 0, self.width, self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(self.strokeColor, 2))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawRect(self.boundingRect())

        font = painter.font()
        font.setPointSize(14)
        painter.setFont(font)
        painter.setPen(self.textColor)
        painter.drawText(self.boundingRect(), Qt.AlignCenter, self._value)

    def set_value(self, value):
        self._value = str(value)
        self.update()

    def setFillColor(self, color: QColor):
        self.fillColor = QColor(color)
        self.update()

    def contextMenuEvent(self, event):
        menu = QMenu()
        remove_action = menu.addAction("Remove")
        chosen = menu.exec_(event.screenPos())
        if chosen == remove_action:
            self.contextRemove.emit(self.cell_id)


class SlotItem(QGraphicsObject):
    width = CellItem.width
    height = CellItem.height

    def __init__(self):
        super().__init__()
        self.fillColor = QColor("#f6f6fd")
        self.strokeColor = QColor("#74828a")

    def boundingRect(self):
        return QRectF(0, 0, self.width, self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(self.strokeColor, 1.6))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawRect(self.boundingRect())
