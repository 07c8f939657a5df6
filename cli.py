# cli.py
import argparse
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.storeclient import StoreClient
from sdk.viewmodel import EditPolicy, StorefrontViewModel
from storefront.config import settings

console = Console()

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], vm: StorefrontViewModel):
    if not products:
        console.print("[italic yellow]No products found.[/italic yellow]")
        return

    table = Table(
        title="📦 Products Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Name", style="bold", width=36)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Category", width=18)
    table.add_column("", width=10)

    for p in products:
        tags = []
        if p.get("isLocal"):
            tags.append("[green]Custom[/green]")
        if vm.in_cart(p["id"]):
            tags.append("[blue]In Cart[/blue]")
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name", "N/A"),
            f"₹{float(p.get('price', 0)):.2f}",
            p.get("category") or "-",
            " ".join(tags)
        )
    console.print(table)


def show_cart(vm: StorefrontViewModel):
    title = Text()
    title.append("🛒 Your Cart", style="bold")
    title.append(f" - Total: ₹{vm.cart_total:.2f}", style="bold green")

    if not vm.cart:
        console.print(Panel("Your cart is empty. 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=8)
    table.add_column("Product", style="bold", width=36)
    table.add_column("Price", justify="right", width=12)

    for item in vm.cart:
        table.add_row(str(item["id"]), item.get("name", "Unknown"), f"₹{float(item['price']):.2f}")

    console.print(Panel(table, title=title, border_style="blue"))


def show_detail(product: Dict[str, Any]):
    body = Text()
    body.append(f"₹{float(product['price']):.2f}\n", style="bold blue")
    if product.get("category"):
        body.append(f"{product['category']}\n", style="cyan")
    body.append(f"{product.get('imageUrl', '')}\n\n", style="dim")
    body.append(product.get("description") or "")
    console.print(Panel(body, title=f"ℹ️ {product['name']}", border_style="magenta"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def show_notice(vm: StorefrontViewModel):
    notice = vm.notice
    if notice:
        console.print(show_status(notice.message, notice.kind == "success"))


# ---------------------------
# Spinner around view-model calls that hit the API
# ---------------------------
def try_api(fn, *args, **kwargs):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return fn(*args, **kwargs)


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer(vm: StorefrontViewModel):
    return WordCompleter([str(p["id"]) for p in vm.filtered], ignore_case=True)


def get_category_completer(vm: StorefrontViewModel):
    return WordCompleter(vm.categories, ignore_case=True)


def create_header(vm: StorefrontViewModel):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Storefront",
        f"[bold blue]🛒 {vm.cart_count} in cart[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_product(vm: StorefrontViewModel) -> Optional[Dict[str, Any]]:
    raw = prompt_with_autocomplete("Enter product ID", completer=get_product_completer(vm)).strip()
    try:
        product = vm.find(int(raw))
    except ValueError:
        product = None
    if product is None:
        console.print(f"[red]No product with id '{raw}'.[/red]")
    return product


def ask_form(current: Dict[str, str], vm: StorefrontViewModel) -> Dict[str, str]:
    return {
        "name": Prompt.ask("Product name", default=current.get("name") or None) or "",
        "price": Prompt.ask("💰 Price", default=current.get("price") or None) or "",
        "imageUrl": Prompt.ask("🖼️ Image URL", default=current.get("imageUrl") or None) or "",
        "category": prompt_with_autocomplete("🏷️ Category (optional)", completer=get_category_completer(vm),
                                             default=current.get("category", "")),
    }


# ---------------------------
# Main menu
# ---------------------------
def menu(vm: StorefrontViewModel):
    console.clear()

    if not try_api(vm.load):
        console.print(Panel.fit(f"[red]{vm.error}[/red]", title="❌ Could not load products"))
        sys.exit(1)

    while True:
        console.print(create_header(vm))
        show_notice(vm)

        filters = []
        if vm.search:
            filters.append(f"search='{vm.search}'")
        if vm.category:
            filters.append(f"category='{vm.category}'")
        if filters:
            console.print(f"[dim]Filters: {', '.join(filters)}[/dim]")

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "7", "🛒 Add to cart"),
            ("2", "🔍 Search products", "8", "➖ Remove from cart"),
            ("3", "🏷️ Choose category", "9", "🧾 View cart"),
            ("4", "➕ Add product", "10", "ℹ️ Product details"),
            ("5", "✏️ Edit product", "11", "🔄 Reload"),
            ("6", "🗑️ Delete product", "q", "👋 Quit"),
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 12)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            show_products(vm.filtered, vm)

        elif choice == "2":
            vm.set_search(prompt_with_autocomplete("Enter search term (blank to clear)", default=vm.search))
            show_products(vm.filtered, vm)

        elif choice == "3":
            vm.set_category(prompt_with_autocomplete(
                "Category (blank for all)", completer=get_category_completer(vm), default=vm.category
            ).strip())
            show_products(vm.filtered, vm)

        elif choice == "4":
            vm.update_form(**ask_form(vm.form, vm))
            if try_api(vm.submit_add):
                console.print(show_status(vm.form_success, True))
            else:
                console.print(show_status(vm.form_error, False))

        elif choice == "5":
            product = ask_product(vm)
            if product:
                vm.open_edit(product)
                vm.update_edit_form(**ask_form(vm.edit_form, vm))
                if try_api(vm.save_edit):
                    console.print(show_status("Product updated!", True))
                else:
                    console.print(show_status(vm.edit_error, False))
                    vm.close_edit()

        elif choice == "6":
            product = ask_product(vm)
            if product:
                vm.request_delete(product["id"])
                if Confirm.ask("[red]Are you sure you want to delete this product?[/red]"):
                    if not try_api(vm.confirm_delete):
                        console.print(show_status(vm.error_message, False))
                else:
                    vm.cancel_delete()

        elif choice == "7":
            product = ask_product(vm)
            if product:
                vm.add_to_cart(product)
                show_cart(vm)

        elif choice == "8":
            product = ask_product(vm)
            if product:
                vm.remove_from_cart(product["id"])
                show_cart(vm)

        elif choice == "9":
            show_cart(vm)

        elif choice == "10":
            product = ask_product(vm)
            if product:
                show_detail(try_api(vm.open_detail, product))
                vm.close_detail()

        elif choice == "11":
            if not try_api(vm.load):
                console.print(show_status(vm.error, False))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thanks for shopping! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        # Add a separator before next iteration
        console.print()
        console.rule(style="dim")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Storefront terminal client")
    parser.add_argument("--base-url", default=settings.api_base_url, help="Catalog API base URL")
    parser.add_argument(
        "--edit-policy",
        required=True,
        choices=[p.value for p in EditPolicy],
        help="How edits are applied: client-only, persist-local or local-only",
    )
    args = parser.parse_args(argv)

    client = StoreClient(base_url=args.base_url, timeout=settings.request_timeout)
    vm = StorefrontViewModel(client, EditPolicy(args.edit_policy), notice_seconds=settings.notice_seconds)
    menu(vm)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
