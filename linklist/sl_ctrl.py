from PyQt5.QtWidgets import QGridLayout, QInputDialog, QSpinBox, QVBoxLayout, QWidget

from core.base_ctrl import StructureController
from core.cell_view import CellRowView
from core.global_ctrl import GlobalController
from linklist.sl_model import LinkedListModel


class LinkedListController(StructureController):
    """
    Controller builds the operation panel and wires UI events -> model -> view.
    """

    def __init__(self, global_ctrl: GlobalController):
        super().__init__(global_ctrl)
        self.model = LinkedListModel()
        self.view = CellRowView(global_ctrl)

        self._build_inputs()
        self.panel = self._create_panel()

        self._bind_view()
        self.view.removeRequested.connect(self._handle_remove_from_node)

        self._refresh_inputs()

    # ---------- Panel UI ----------

    def _build_inputs(self):
        self.insert_index_spin = QSpinBox()
        self.insert_value_edit = self._line_edit("Value", self._on_insert)
        self.remove_index_spin = QSpinBox()
        self.find_value_edit = self._line_edit("Value", self._on_find)

    def _create_panel(self):
        container = QWidget()
        outer = QVBoxLayout(container)
        outer.setContentsMargins(0, 0, 0, 0)
        layout = QGridLayout()
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 1)

        self.create_btn = self._button("Create From List", self._on_create)
        self.insert_btn = self._button("Insert", self._on_insert)
        self.remove_btn = self._button("Remove", self._on_remove)
        self.find_btn = self._button("Find", self._on_find)

        layout.addWidget(self._single_button_group("Create", self.create_btn), 0, 0)
        layout.addWidget(
            self._form_group(
                "Insert At",
                [("Index:", self.insert_index_spin), ("Value:", self.insert_value_edit)],
                self.insert_btn,
            ),
            1,
            0,
        )
        layout.addWidget(self._form_group("Remove At", [("Index:", self.remove_index_spin)], self.remove_btn), 0, 1)
        layout.addWidget(self._form_group("Find", [("Value:", self.find_value_edit)], self.find_btn), 1, 1)

        outer.addLayout(layout)
        outer.addWidget(self.status_label)
        outer.addStretch(1)
        return container

    def view_snapshot(self):
        nodes = self.model.snapshot()
        return {"slots": nodes, "markers": {0: "head"} if nodes else {}, "linked": True}

    # ---------- Event handlers ----------

    def _on_create(self):
        text, ok = QInputDialog.getText(self, "Create Linked List", "Enter values (comma-separated):")
        if not ok:
            return
        self.model.create_from_iterable(self._parse_sequence(text, self.coerce_any))
        self.view.reset()
        self.view.show_snapshot(self.view_snapshot())
        self._refresh_inputs()

    def _on_insert(self):
        raw = self._require_value(self.insert_value_edit, "插入")
        if raw is None:
            return
        index = self.insert_index_spin.value()
        node_id = self.model.insert(index, self.coerce_any(raw))
        self.view.animate_insert(self.view_snapshot(), node_id)
        self.insert_value_edit.clear()
        self.set_status(f"inserted at {index}, length {len(self.model)}")
        self._refresh_inputs()

    def _on_remove(self):
        if self.model.length == 0:
            return
        index = self.remove_index_spin.value()
        removed = self.model.remove(index)
        self.view.animate_remove(self.view_snapshot(), removed["id"])
        self.set_status(f"removed {removed['value']} from {index}")
        self._refresh_inputs()

    def _on_find(self):
        raw = self._require_value(self.find_value_edit, "查找")
        if raw is None:
            return
        index = self.model.find(self.coerce_any(raw))
        if index < 0:
            self.set_status("未找到目标值。")
            return
        snapshot = self.view_snapshot()
        self.view.animate_highlight(snapshot, snapshot["slots"][index]["id"])
        self.set_status(f"found at index {index}")

    def _handle_remove_from_node(self, node_id):
        index = self.view.slot_of(node_id)
        if index < 0:
            return
        self.remove_index_spin.setValue(index)
        self._on_remove()

    # ---------- Helpers ----------

    def _refresh_inputs(self):
        length = self.model.length
        locked = self._panel_locked
        self.insert_index_spin.setRange(0, length)
        self.remove_index_spin.setRange(0, max(0, length - 1))

        self.create_btn.setDisabled(locked)
        self.insert_btn.setDisabled(locked)
        self.insert_value_edit.setDisabled(locked)
        self.insert_index_spin.setDisabled(locked)
        for widget in (self.remove_btn, self.remove_index_spin, self.find_btn, self.find_value_edit):
            widget.setDisabled(locked or length == 0)
