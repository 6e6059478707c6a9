import math
from typing import Callable, Dict, Iterable, List, Optional, Set

from PyQt5.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPainterPath, QPen, QTransform
from PyQt5.QtWidgets import QGraphicsItem, QGraphicsObject, QGraphicsPathItem, QMenu

from core.base_view import BaseStructureView

PATH_COLOR = "#4fc3f7"
FOUND_COLOR = "#ff5252"
REMOVE_COLOR = "#ff7043"
PIVOT_COLOR = "#ffd54f"


class TreeView(BaseStructureView):
    """
    二叉树通用视图：AVL、BST 与堆共用。
    节点按 id 追踪，结构变化（包括旋转、堆的交换）统一表现为节点移动到新布局。
    """

    deleteRequested = pyqtSignal(int)
    findRequested = pyqtSignal(int)
    clearAllRequested = pyqtSignal()
    searchFinished = pyqtSignal(bool)

    h_gap = 90  # 相邻子树之间的最小水平间距
    v_gap = 130  # 层间距
    single_child_offset = 60

    def __init__(self, global_ctrl, badge_formatter: Optional[Callable[[dict], str]] = None):
        super().__init__(global_ctrl)
        self.scene.installEventFilter(self)
        self._badge_formatter = badge_formatter

        self.node_items: Dict[int, TreeNodeItem] = {}
        self.edge_items: Dict[tuple, TreeEdgeItem] = {}
        self._last_snapshot = {"root": None, "nodes": []}

    # ---------- Public API ----------

    def reset(self):
        self.stop_all_animations()
        self.scene.clear()
        self.node_items.clear()
        self.edge_items.clear()
        self._last_snapshot = {"root": None, "nodes": []}

    def show_snapshot(self, snapshot):
        """Render snapshot immediately, no animation."""
        self._finalize_snapshot(snapshot, self.compute_layout(snapshot))

    def animate_build(self, snapshot):
        self.reset()
        if not snapshot["nodes"]:
            return

        positions = self.compute_layout(snapshot)
        nodes = self._node_map(snapshot)
        sequential = self.anim.sequential()
        for node_id in self.level_order(snapshot):
            item = self._create_node_item(node_id, nodes[node_id]["value"])
            target = positions[node_id]
            item.setPos(QPointF(target.x(), target.y() - 160))
            item.setOpacity(0.0)
            drop = self.anim.move_item(item, target, duration=560)
            fade = self.anim.fade_item(item, 0.0, 1.0, duration=560)
            sequential.addAnimation(self.anim.parallel(drop, fade))

        sequential.addAnimation(self.anim.pause(140))
        self._track_animation(
            sequential,
            finalizer=lambda: self._finalize_snapshot(snapshot, positions),
        )

    def animate_insert(self, snapshot, inserted_id, path_ids, pivot_ids: Iterable[int] = ()):
        positions = self.compute_layout(snapshot)
        if not positions:
            return

        restore_colors: List[tuple] = []
        sequence = self.anim.sequential()
        traversal = self._build_path_flash(
            [nid for nid in path_ids or [] if nid != inserted_id], restore_colors
        )
        if traversal:
            sequence.addAnimation(traversal)

        item = self.node_items.get(inserted_id)
        if item is None and inserted_id in positions:
            item = self._create_node_item(inserted_id, self._node_map(snapshot)[inserted_id]["value"])
            spawn = self._spawn_position(path_ids, positions[inserted_id])
            item.setPos(spawn)
            item.setOpacity(0.0)
            sequence.addAnimation(self.anim.fade_item(item, 0.0, 1.0, duration=320))
        elif item is not None:
            # 重复插入：只闪烁已存在的节点
            sequence.addAnimation(self._flash_item(item, PIVOT_COLOR, restore_colors))

        sequence.addAnimation(self._restructure_stage(snapshot))
        relayout = self._animate_relayout(positions)
        if relayout:
            sequence.addAnimation(relayout)
        pivots = self._build_pivot_flash(pivot_ids, restore_colors)
        if pivots:
            sequence.addAnimation(pivots)

        self._track_animation(
            sequence,
            finalizer=lambda: self._finalize_with_colors(snapshot, positions, restore_colors),
        )

    def animate_delete(self, snapshot, removed_id, path_ids, pivot_ids: Iterable[int] = ()):
        target = self.node_items.get(removed_id)
        positions = self.compute_layout(snapshot)
        if removed_id is None or target is None:
            self._finalize_snapshot(snapshot, positions)
            return

        restore_colors: List[tuple] = []
        sequence = self.anim.sequential()
        traversal = self._build_path_flash(
            [nid for nid in path_ids or [] if nid != removed_id], restore_colors
        )
        if traversal:
            sequence.addAnimation(traversal)

        sequence.addAnimation(
            self.anim.flash_brush(
                setter=target.setFillColor,
                start_color=target.fillColor,
                end_color=QColor(REMOVE_COLOR),
                duration=360,
                loops=2,
            )
        )
        lift = self.anim.move_item(target, target.pos() + QPointF(0, -150), duration=420)
        fade = self.anim.fade_item(target, 1.0, 0.0, duration=420)
        sequence.addAnimation(self.anim.parallel(lift, fade))
        sequence.addAnimation(self._restructure_stage(snapshot, removed_id))

        relayout = self._animate_relayout(positions)
        if relayout:
            sequence.addAnimation(relayout)
        pivots = self._build_pivot_flash(pivot_ids, restore_colors)
        if pivots:
            sequence.addAnimation(pivots)

        self._track_animation(
            sequence,
            finalizer=lambda: self._finalize_with_colors(snapshot, positions, restore_colors, removed_id),
        )

    def animate_find(self, snapshot, found_id, path_ids):
        positions = self.compute_layout(snapshot)
        restore_colors: List[tuple] = []
        traversal_ids = [nid for nid in path_ids or [] if nid != found_id]

        sequence = self.anim.sequential()
        traversal = self._build_path_flash(traversal_ids, restore_colors, duration_scale=1.25)
        if traversal:
            sequence.addAnimation(traversal)
        if found_id is not None and found_id in self.node_items:
            sequence.addAnimation(
                self._flash_item(self.node_items[found_id], FOUND_COLOR, restore_colors, 525)
            )

        def _finalize():
            self._finalize_with_colors(snapshot, positions, restore_colors)
            self.searchFinished.emit(found_id is not None)

        self._track_animation(sequence, finalizer=_finalize)

    # ---------- Layout ----------

    def compute_layout(self, snapshot) -> Dict[int, QPointF]:
        """
        基于子树宽度的布局：父节点位于子树水平中心，
        左子树整体在左，右子树整体在右，连线不会内凹。
        """
        root_id = snapshot.get("root")
        if root_id is None:
            return {}

        tree = self._node_map(snapshot)
        node_width = TreeNodeItem.width
        widths: Dict[int, float] = {}

        def measure(node_id) -> float:
            if node_id is None or node_id not in tree:
                return 0
            node = tree[node_id]
            left_w = measure(node["left"])
            right_w = measure(node["right"])
            if left_w and right_w:
                width = left_w + right_w + self.h_gap
            elif left_w or right_w:
                only = left_w or right_w
                width = max(
                    node_width / 2 + self.single_child_offset,
                    only + node_width / 2 + self.h_gap / 2,
                )
            else:
                width = node_width
            widths[node_id] = width
            return width

        positions: Dict[int, QPointF] = {}

        def place(node_id, x_center: float, depth: int):
            if node_id is None or node_id not in tree:
                return
            node = tree[node_id]
            positions[node_id] = QPointF(x_center - node_width / 2, depth * self.v_gap - 40)

            left_id, right_id = node["left"], node["right"]
            if left_id is not None and right_id is not None:
                place(left_id, x_center - self.h_gap / 2 - widths[left_id] / 2, depth + 1)
                place(right_id, x_center + self.h_gap / 2 + widths[right_id] / 2, depth + 1)
            elif left_id is not None:
                place(left_id, x_center - self.single_child_offset, depth + 1)
            elif right_id is not None:
                place(right_id, x_center + self.single_child_offset, depth + 1)

        measure(root_id)
        place(root_id, 0.0, 0)
        return positions

    def level_order(self, snapshot) -> List[int]:
        root_id = snapshot.get("root")
        if root_id is None:
            return []
        tree = self._node_map(snapshot)
        queue = [root_id]
        order = []
        while queue:
            node_id = queue.pop(0)
            order.append(node_id)
            node = tree[node_id]
            for child in (node["left"], node["right"]):
                if child is not None:
                    queue.append(child)
        return order

    # ---------- Internal helpers ----------

    @staticmethod
    def _node_map(snapshot):
        return {node["id"]: node for node in snapshot.get("nodes", [])}

    def _badge(self, info) -> str:
        if not self._badge_formatter:
            return ""
        return self._badge_formatter(info)

    def _create_node_item(self, node_id, value):
        item = TreeNodeItem(node_id, value)
        item.contextDelete.connect(self.deleteRequested.emit)
        item.contextFind.connect(self.findRequested.emit)
        self.scene.addItem(item)
        self.node_items[node_id] = item
        return item

    def _spawn_position(self, path_ids, target: QPointF) -> QPointF:
        # 从搜索路径终点旁边出现，没有路径时从上方落下
        anchor = self.node_items.get(path_ids[-1]) if path_ids else None
        if anchor is None:
            return QPointF(target.x(), target.y() - 160)
        return QPointF(anchor.pos().x() + TreeNodeItem.width + 26, anchor.pos().y())

    def _flash_item(self, item, color, restore_store, duration=420):
        original = QColor(item.fillColor)
        restore_store.append((item, original))
        return self.anim.flash_brush(
            setter=item.setFillColor,
            start_color=original,
            end_color=QColor(color),
            duration=duration,
            loops=2,
        )

    def _build_path_flash(self, path_ids, restore_store, duration_scale=1.0):
        items = [self.node_items[nid] for nid in path_ids if nid in self.node_items]
        if not items:
            return None
        seq = self.anim.sequential()
        for item in items:
            original = QColor(item.fillColor)
            restore_store.append((item, original))
            seq.addAnimation(
                self.anim.flash_brush(
                    setter=item.setFillColor,
                    start_color=original,
                    end_color=QColor(PATH_COLOR),
                    duration=int(240 * duration_scale),
                )
            )
        return seq

    def _build_pivot_flash(self, pivot_ids, restore_store):
        flashes = [
            self._flash_item(self.node_items[nid], PIVOT_COLOR, restore_store, 300)
            for nid in pivot_ids or []
            if nid in self.node_items
        ]
        if not flashes:
            return None
        return self.anim.parallel(*flashes)

    def _restructure_stage(self, snapshot, removed_id=None):
        """零时长的阶段：切换到新结构的连线与数值，随后节点再移动到新位置。"""
        stage = self.anim.pause(1)

        def _apply():
            if removed_id is not None:
                self._drop_item(removed_id)
            for info in snapshot["nodes"]:
                item = self.node_items.get(info["id"])
                if item:
                    item.set_value(info["value"])
                    item.set_badge(self._badge(info))
            self._rebuild_edges(snapshot)

        stage.finished.connect(_apply)
        return stage

    def _animate_relayout(self, positions, skip_ids: Optional[Set[int]] = None):
        skip_ids = skip_ids or set()
        motions = [
            self.anim.move_item(item, positions[node_id], duration=480)
            for node_id, item in self.node_items.items()
            if node_id not in skip_ids and node_id in positions
        ]
        if not motions:
            return None
        return self.anim.parallel(*motions)

    def _drop_item(self, node_id):
        item = self.node_items.pop(node_id, None)
        if item is not None and item.scene():
            self.scene.removeItem(item)

    def _finalize_with_colors(self, snapshot, positions, restore_colors, removed_id=None):
        for item, color in restore_colors:
            if item and item.scene():
                item.setFillColor(color)
        self._finalize_snapshot(snapshot, positions, removed_id)

    def _finalize_snapshot(self, snapshot, positions, removed_id=None):
        keep_ids = {node["id"] for node in snapshot["nodes"]}
        if removed_id is not None:
            self._drop_item(removed_id)
        for node_id in list(self.node_items.keys()):
            if node_id not in keep_ids:
                self._drop_item(node_id)

        for info in snapshot["nodes"]:
            item = self.node_items.get(info["id"])
            if not item:
                item = self._create_node_item(info["id"], info["value"])
            item.setOpacity(1.0)
            item.set_value(info["value"])
            item.set_badge(self._badge(info))
            if info["id"] in positions:
                item.setPos(positions[info["id"]])

        self._last_snapshot = snapshot
        self._rebuild_edges(snapshot)
        self.auto_fit_view()

    def _rebuild_edges(self, snapshot):
        for edge in list(self.edge_items.values()):
            if edge.scene():
                self.scene.removeItem(edge)
        self.edge_items.clear()

        for info in snapshot["nodes"]:
            parent_item = self.node_items.get(info["id"])
            for child_key in ("left", "right"):
                child_item = self.node_items.get(info[child_key])
                if not parent_item or not child_item:
                    continue
                edge = TreeEdgeItem(parent_item, child_item)
                self.scene.addItem(edge)
                self.edge_items[(info["id"], info[child_key])] = edge

    def _show_background_menu(self, screen_pos):
        if isinstance(screen_pos, QPointF):
            screen_pos = screen_pos.toPoint()
        menu = QMenu()
        clear_action = menu.addAction("Clear Tree")
        chosen = menu.exec_(screen_pos)
        if chosen == clear_action:
            self.clearAllRequested.emit()

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            item = self.scene.itemAt(event.scenePos(), QTransform())
            if item is None:
                self._show_background_menu(event.screenPos())
                event.accept()
                return True
        return super().eventFilter(watched, event)


class TreeNodeItem(QGraphicsObject):
    contextDelete = pyqtSignal(int)
    contextFind = pyqtSignal(int)
    positionChanged = pyqtSignal()

    width = 70
    height = 70

    def __init__(self, node_id, value):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self._badge = ""
        self.fillColor = QColor("#e9e9ef")
        self.strokeColor = QColor("#4a4a52")
        self.textColor = QColor("#1f1f24")
        self.badgeColor = QColor("#90a4ae")
        self.setZValue(2)
        self.setFlag(QGraphicsItem.ItemIsSelectable, True)
        self.setFlag(QGraphicsItem.ItemSendsGeometryChanges, True)

    @property
    def value_text(self) -> str:
        return self._value

    @property
    def badge_text(self) -> str:
        return self._badge

    def boundingRect(self):
        # 下方留出标注高度/平衡因子的空间
        return QRectF(-20, 0, self.width + 40, self.height + 22)

    def paint(self, painter, option, widget=None):
        circle = QRectF(0, 0, self.width, self.height)
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(self.strokeColor, 2))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawEllipse(circle)

        painter.setPen(self.textColor)
        painter.drawText(circle, Qt.AlignCenter, self._value)

        if self._badge:
            font = painter.font()
            font.setPointSize(max(6, font.pointSize() - 2))
            painter.setFont(font)
            painter.setPen(self.badgeColor)
            painter.drawText(QRectF(-20, self.height + 2, self.width + 40, 20), Qt.AlignCenter, self._badge)

    def set_value(self, value):
        self._value = str(value)
        self.update()

    def set_badge(self, text: str):
        if text != self._badge:
            self._badge = text
            self.update()

    def setFillColor(self, color: QColor):
        self.fillColor = QColor(color)
        self.update()

    def contextMenuEvent(self, event):
        menu = QMenu()
        delete_action = menu.addAction("Delete Node")
        find_action = menu.addAction("Find Node")
        chosen = menu.exec_(event.screenPos())
        if chosen == delete_action:
            self.contextDelete.emit(self.node_id)
        elif chosen == find_action:
            self.contextFind.emit(self.node_id)

    def itemChange(self, change, value):
        if change == QGraphicsItem.ItemPositionHasChanged:
            self.positionChanged.emit()
        return super().itemChange(change, value)


class TreeEdgeItem(QGraphicsPathItem):
    def __init__(self, parent_item: TreeNodeItem, child_item: TreeNodeItem):
        super().__init__()
        self.parent_item = parent_item
        self.child_item = child_item

        pen = QPen(QColor("#9e9e9e"), 2)
        pen.setCapStyle(Qt.RoundCap)
        self.setPen(pen)
        self.setZValue(1)

        self.parent_item.positionChanged.connect(self.update_geometry)
        self.child_item.positionChanged.connect(self.update_geometry)
        self.update_geometry()

    def update_geometry(self):
        start = self._center(self.parent_item)
        end = self._center(self.child_item)

        direction = end - start
        length = math.hypot(direction.x(), direction.y())
        offset = TreeNodeItem.width / 2

        if length > 1e-6:
            ux = direction.x() / length
            uy = direction.y() / length
            start_point = start + QPointF(ux * offset, uy * offset)
            end_point = end - QPointF(ux * offset, uy * offset)
        else:
            start_point = end_point = start

        path = QPainterPath(start_point)
        path.lineTo(end_point)
        self.setPath(path)

    @staticmethod
    def _center(node_item: TreeNodeItem):
        pos = node_item.scenePos()
        return QPointF(pos.x() + TreeNodeItem.width / 2, pos.y() + TreeNodeItem.height / 2)
