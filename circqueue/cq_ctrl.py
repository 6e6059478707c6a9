import logging

from PyQt5.QtWidgets import QMessageBox, QVBoxLayout, QWidget

from circqueue.cq_model import CircularQueueModel
from core.base_ctrl import StructureController
from core.cell_view import CellRowView

logger = logging.getLogger(__name__)


class QueueController(StructureController):
    """循环队列面板：入队、出队、查看队头/队尾。"""

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.model = CircularQueueModel()
        self.view = CellRowView(global_ctrl)
        self.panel = self._build_panel()
        self._bind_view()
        self.view.show_snapshot(self.view_snapshot())
        self._refresh_inputs()

    def _build_panel(self):
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.enqueue_input = self._line_edit("Value", self._on_enqueue)
        self.enqueue_btn = self._button("Enqueue", self._on_enqueue)
        self.dequeue_btn = self._button("Dequeue", self._on_dequeue)
        self.front_btn = self._button("Front", lambda: self._on_peek("front"))
        self.rear_btn = self._button("Rear", lambda: self._on_peek("rear"))

        layout.addWidget(self._form_group("Enqueue", [("Value:", self.enqueue_input)], self.enqueue_btn))
        layout.addWidget(self._single_button_group("Dequeue", self.dequeue_btn))
        layout.addWidget(self._single_button_group("Front", self.front_btn))
        layout.addWidget(self._single_button_group("Rear", self.rear_btn))
        layout.addWidget(self.status_label)
        layout.addStretch(1)
        return container

    def view_snapshot(self):
        snap = self.model.snapshot()
        markers = {}
        if snap["front"] is not None:
            markers[snap["front"]] = "front"
            rear = snap["rear"]
            markers[rear] = "front/rear" if rear == snap["front"] else "rear"
        return {"slots": snap["slots"], "markers": markers, "linked": False}

    def _on_enqueue(self):
        if self.model.is_full():
            logger.info("enqueue rejected, %d slots in use", self.model.capacity)
            QMessageBox.information(self, "Queue", f"Queue is full ({self.model.capacity} slots).")
            return
        value_text = self.enqueue_input.text().strip() or "∅"
        slot = self.model.enqueue(self.coerce_any(value_text))
        cell = self.model.snapshot()["slots"][slot]
        self.view.animate_insert(self.view_snapshot(), cell["id"])
        self.enqueue_input.clear()
        self.set_status(f"size {len(self.model)} / {self.model.capacity}")
        self._refresh_inputs()

    def _on_dequeue(self):
        if self.model.is_empty():
            QMessageBox.information(self, "Queue", "Queue is empty.")
            return
        info = self.model.dequeue()
        self.view.animate_remove(self.view_snapshot(), info["id"])
        self.set_status(f"dequeued {info['value']}")
        self._refresh_inputs()

    def _on_peek(self, end):
        if self.model.is_empty():
            QMessageBox.information(self, "Queue", "Queue is empty.")
            return
        snap = self.model.snapshot()
        cell = snap["slots"][snap[end]]
        self.view.animate_highlight(self.view_snapshot(), cell["id"])
        self.set_status(f"{end} is {cell['value']}")

    def _refresh_inputs(self):
        locked = self._panel_locked
        empty = self.model.is_empty()
        self.enqueue_btn.setDisabled(locked or self.model.is_full())
        self.enqueue_input.setDisabled(locked)
        for btn in (self.dequeue_btn, self.front_btn, self.rear_btn):
            btn.setDisabled(locked or empty)

    def _on_clear_all_requested(self):
        self.model.clear()
        self.view.reset()
        self.view.show_snapshot(self.view_snapshot())
        self.set_status("")
        self._refresh_inputs()
