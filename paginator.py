"""
Paging over an already-fetched list of rows.

Paginator holds the page state and does the arithmetic; browse() runs the
interactive session on top of it (n / p / <page number> / q).
"""

import presenter
from errors import InputClosedError, ValidationError


NAVIGATION_HELP = "Invalid input. Enter a number or 'n', 'p', or 'q'."


class Paginator:
    """Page state for one listing. Pages are 1-based."""

    def __init__(self, items, page_size: int):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.items = list(items)
        self.page_size = page_size
        self.current_page = 1

    @property
    def total_pages(self) -> int:
        return max(1, -(-len(self.items) // self.page_size))

    def next_page(self) -> int:
        self.current_page = min(self.current_page + 1, self.total_pages)
        return self.current_page

    def previous_page(self) -> int:
        self.current_page = max(self.current_page - 1, 1)
        return self.current_page

    def jump(self, page: int) -> int:
        """Go to `page`. Out of range raises ValidationError and keeps the current page."""
        if not 1 <= page <= self.total_pages:
            raise ValidationError(f"Invalid page number. Must be between 1 and {self.total_pages}.")
        self.current_page = page
        return self.current_page

    def navigate(self, token: str) -> bool:
        """Apply one navigation token. Returns False when the user quits."""
        token = token.strip().lower()
        if token in ("q", "quit"):
            return False
        if token == "n":
            self.next_page()
        elif token == "p":
            self.previous_page()
        else:
            try:
                page = int(token)
            except ValueError:
                raise ValidationError(NAVIGATION_HELP) from None
            self.jump(page)
        return True

    def bounds(self):
        """(start, end) slice indices of the current page."""
        start = (self.current_page - 1) * self.page_size
        return start, min(start + self.page_size, len(self.items))

    def page_items(self):
        start, end = self.bounds()
        return self.items[start:end]


def render_page(paginator: Paginator, columns) -> str:
    start, end = paginator.bounds()
    header = f"\nDisplaying Page {paginator.current_page} (Rows {start + 1} to {end})"
    return header + "\n" + presenter.render(columns, paginator.page_items(), start=start + 1)


def browse(console, columns, items, page_size: int, noun: str = "rows"):
    """Interactive paging session. Returns the final Paginator, or None if there was nothing to show."""
    paginator = Paginator(items, page_size)
    count = len(paginator.items)
    if count == 0:
        console.say(f"No {noun} found in the database.")
        return None

    console.say(render_page(paginator, columns))
    while True:
        total = paginator.total_pages
        console.say(f"\nTotal {noun}: {count}. Total pages: {total} (Size: {page_size} {noun}/page)")
        try:
            token = console.ask(
                f"Enter page number (1 to {total}, 'n' for next, 'p' for previous, "
                f"'q' to quit list) (Current: {paginator.current_page}): "
            )
        except InputClosedError:
            break

        try:
            if not paginator.navigate(token):
                break
        except ValidationError as e:
            console.error(str(e))
            continue

        console.say(render_page(paginator, columns))

    return paginator
