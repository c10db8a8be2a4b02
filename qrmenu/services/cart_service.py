from decimal import Decimal
from typing import Any, Callable, Dict, Iterable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from qrmenu.data.models.cart import CartModel
from qrmenu.data.models.cart_item import CartItemModel
from qrmenu.domain.errors import ConflictError, InconsistentError, InvalidQuantity, ItemNotFound
from qrmenu.domain.limits import check_amount, check_quantity
from qrmenu.repos.cart_repo import CartRepo
from qrmenu.services.identity_service import IdentityService
from qrmenu.services.lock_service import LockService
from qrmenu.utils.money import ZERO, sum_lines, to_money
from qrmenu.utils.retry import conflict_retry
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)


def compute_total(items: Iterable[CartItemModel]) -> Decimal:
    """Suma koszyka liczona zawsze od zera z aktualnej listy pozycji."""
    return sum_lines((i.price, i.quantity) for i in items)


class CartService:
    """
    Prosta implementacja cqrs dla domeny cart
    commands (add, update, remove, clear) modyfikuja stan pod lockiem konta
    query (get) tylko odczyt
    """

    def __init__(self, db: Session, catalog, lock_service: LockService):
        self.repo = CartRepo(db)
        self.identity = IdentityService(db)
        self.catalog = catalog
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, account_id: int) -> Dict[str, Any]:
        cart = self.get_or_create_cart(account_id)

        # suma zapisana musi sie zgadzac z pozycjami
        if to_money(cart.total_amount) != compute_total(cart.items):
            logger.error(
                f"Cart {cart.id} total {cart.total_amount} does not match items "
                f"({compute_total(cart.items)})"
            )
            raise InconsistentError(f"Cart {cart.id} total does not match its items")

        return self._to_view(cart)

    def get_or_create_cart(self, account_id: int) -> CartModel:
        self.identity.resolve_account(account_id)

        cart = self.repo.get_cart_by_account(account_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(
                CartModel(account_id=account_id, total_amount=ZERO, version=1)
            )
        except IntegrityError:
            # rownolegle utworzenie - drugi request wygral, bierzemy jego koszyk
            self.repo.rollback()
            cart = self.repo.get_cart_by_account(account_id)
            if cart is None:
                raise ConflictError(f"Could not create cart for account {account_id}")
            return cart

        logger.info(f"Utworzono nowy koszyk {created.id} dla konta {account_id}")
        return created

    #commands
    def add_item(self, account_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        check_quantity(quantity)

        self.identity.resolve_account(account_id)

        # HTTP / DB -> katalog (walidacja + cena), poza sekcja krytyczna
        snapshot = self.catalog.resolve_product(product_id)

        def mutate(cart: CartModel):
            existing_item = self.repo.get_cart_item(cart, product_id)
            if existing_item:
                # suma po zwiekszeniu tez musi sie miescic w limicie
                new_quantity = check_quantity(existing_item.quantity + quantity)
                logger.info(
                    f"Produkt {product_id} już jest w koszyku, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {new_quantity}"
                )
                existing_item.quantity = new_quantity
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
                cart.items.append(CartItemModel.from_snapshot(snapshot, quantity))

        return self._mutate(account_id, mutate)

    def update_item(self, account_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        def mutate(cart: CartModel):
            item = self.repo.get_cart_item(cart, product_id)
            if item is None:
                raise ItemNotFound(product_id)

            if quantity <= 0:
                logger.info(f"Ilosc {quantity} - usuwam produkt {product_id} z koszyka {cart.id}")
                cart.items.remove(item)
            else:
                item.quantity = check_quantity(quantity)

        return self._mutate(account_id, mutate)

    def remove_item(self, account_id: int, product_id: int) -> Dict[str, Any]:
        def mutate(cart: CartModel):
            item = self.repo.get_cart_item(cart, product_id)
            if item is None:
                logger.info(f"Produktu {product_id} nie ma w koszyku {cart.id}, nic do usuniecia")
                return
            cart.items.remove(item)

        return self._mutate(account_id, mutate)

    def clear(self, account_id: int) -> None:
        def mutate(cart: CartModel):
            cart.items.clear()

        self._mutate(account_id, mutate)

    def _mutate(self, account_id: int, mutation: Callable[[CartModel], None]) -> Dict[str, Any]:
        """
        read items -> mutate -> recompute total -> persist, atomowo dla jednego koszyka.
        Lock w redis serializuje requesty tego samego konta, a warunek na version
        wykrywa zapis, ktory ominal lock. Konflikt powtarzamy (conflict_retry).
        """

        @conflict_retry()
        def attempt():
            with self.lock_service.cart_lock(account_id):
                return self._apply(account_id, mutation)

        return attempt()

    def _apply(self, account_id: int, mutation: Callable[[CartModel], None]) -> Dict[str, Any]:
        cart = self.get_or_create_cart(account_id)
        old_version = cart.version

        try:
            mutation(cart)
            total = check_amount(compute_total(cart.items))
            self.repo.db.flush()

            # Optimistic locking
            # np w bazie update set version 2 where id 1 and version 1
            rowcount = self.repo.update_cart_version(
                cart_id=cart.id,
                old_version=old_version,
                new_data={"version": old_version + 1, "total_amount": total},
            )
        except (ItemNotFound, InvalidQuantity):
            self.repo.rollback()
            raise
        except IntegrityError as e:
            # np. u_cart_product przy wyscigu dwoch dodan tego samego produktu
            self.repo.rollback()
            logger.error(f"Blad zapisu koszyka {cart.id}: {e}")
            raise ConflictError(f"Cart {cart.id} was modified concurrently")
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad zapisu koszyka {cart.id}: {e}")
            raise

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Konflikt wspolbieznosci na koszyku {cart.id} (version {old_version})")
            raise ConflictError(f"Cart {cart.id} was modified by another operation")

        self.repo.commit()

        logger.info(f"Koszyk {cart.id} zapisany, suma {total}, nowa wersja: {old_version + 1}")

        fresh = self.repo.get_cart_by_account(account_id)
        return self._to_view(fresh)

    @staticmethod
    def _to_view(cart: CartModel) -> Dict[str, Any]:
        #dict przyksztalcany w jsona
        return {
            "cart_id": cart.id,
            "account_id": cart.account_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": to_money(i.price),
                    "quantity": i.quantity,
                    "image": i.image,
                    "category_id": i.category_id,
                    "category_name": i.category_name,
                }
                for i in cart.items
            ],
            "total": to_money(cart.total_amount),
            "item_count": len(cart.items),
        }
