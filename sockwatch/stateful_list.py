class StatefulList:
    """
    Ordered items plus an optional cursor for keyboard navigation.

    ``selected`` is None until the user first moves, and whenever the list is
    empty; otherwise it is a valid index into ``items``. Selection is positional:
    after ``replace_items`` the cursor keeps its index, not its item.
    """

    def __init__(self, items=None):
        self.items = list(items or [])
        self.selected = None

    @classmethod
    def with_items(cls, items):
        return cls(items)

    def __len__(self):
        return len(self.items)

    def next(self):
        if not self.items:
            self.selected = None
            return
        if self.selected is None or self.selected >= len(self.items) - 1:
            self.selected = 0
        else:
            self.selected += 1

    def previous(self):
        if not self.items:
            self.selected = None
            return
        if self.selected is None:
            self.selected = 0
        elif self.selected == 0:
            self.selected = len(self.items) - 1
        else:
            self.selected -= 1

    def replace_items(self, items):
        self.items = list(items)
        if not self.items:
            self.selected = None
        elif self.selected is not None and self.selected >= len(self.items):
            self.selected = len(self.items) - 1

    def selected_item(self):
        if self.selected is None:
            return None
        return self.items[self.selected]
