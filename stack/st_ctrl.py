from PyQt5.QtWidgets import QMessageBox, QSizePolicy, QVBoxLayout, QWidget

from core.base_ctrl import StructureController
from core.cell_view import CellRowView
from stack.st_model import StackModel


class StackController(StructureController):
    """Controller for the growable stack visualization."""

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.model = StackModel()
        self.view = CellRowView(global_ctrl)
        self.panel = self._build_panel()
        self._bind_view()
        self.view.removeRequested.connect(self._on_remove_requested)
        self.view.show_snapshot(self.view_snapshot())
        self._refresh_inputs()

    def _build_panel(self):
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.push_input = self._line_edit("Value", self._on_push)
        self.push_btn = self._button("Push", self._on_push)
        self.pop_btn = self._button("Pop", self._on_pop)
        self.peek_btn = self._button("Peek", self._on_peek)
        for btn in (self.push_btn, self.pop_btn, self.peek_btn):
            btn.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        layout.addWidget(self._form_group("Push", [("Value:", self.push_input)], self.push_btn))
        layout.addWidget(self._single_button_group("Pop", self.pop_btn))
        layout.addWidget(self._single_button_group("Peek", self.peek_btn))
        layout.addWidget(self.status_label)
        layout.addStretch(1)
        return container

    def view_snapshot(self):
        items = self.model.snapshot()
        slots = items + [None] * (self.model.capacity - len(items))
        markers = {len(items) - 1: "top"} if items else {}
        return {"slots": slots, "markers": markers, "linked": False}

    def _on_push(self):
        value_text = self.push_input.text().strip()
        if not value_text:
            value_text = "∅"
        capacity = self.model.capacity
        info = self.model.push(self.coerce_any(value_text))
        self.view.animate_insert(self.view_snapshot(), info["id"])
        self.push_input.clear()
        if self.model.capacity != capacity:
            self.set_status(f"capacity {capacity} → {self.model.capacity}")
        else:
            self.set_status(f"size {len(self.model)} / capacity {self.model.capacity}")
        self._refresh_inputs()

    def _on_pop(self):
        if self.model.is_empty():
            QMessageBox.information(self, "Stack", "Stack is empty.")
            return
        popped = self.model.pop()
        self.view.animate_remove(self.view_snapshot(), popped["id"])
        self.set_status(f"popped {popped['value']}")
        self._refresh_inputs()

    def _on_peek(self):
        if self.model.is_empty():
            QMessageBox.information(self, "Stack", "Stack is empty.")
            return
        top = self.model.peek()
        self.view.animate_highlight(self.view_snapshot(), top["id"])
        self.set_status(f"top is {top['value']}")

    def _on_remove_requested(self, cell_id):
        # 栈只能从栈顶弹出
        top = None if self.model.is_empty() else self.model.peek()
        if top and top["id"] == cell_id:
            self._on_pop()

    def _refresh_inputs(self):
        locked = self._panel_locked
        empty = self.model.is_empty()
        self.push_btn.setDisabled(locked)
        self.push_input.setDisabled(locked)
        self.pop_btn.setDisabled(locked or empty)
        self.peek_btn.setDisabled(locked or empty)

    def _on_clear_all_requested(self):
        self.model.clear()
        self.view.reset()
        self.view.show_snapshot(self.view_snapshot())
        self.set_status("")
        self._refresh_inputs()
