"""Ordering load test scenarios.

ShopperUser walks a stateful cart-to-order journey: fill the cart, adjust it,
check out, pay or cancel, then read the order back. AdminUser polls the
listing endpoints and moves paid orders forward.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    admin_token,
    cart_items,
    checkout_data,
    customer_tokens,
    discount_data,
    language,
    localized,
)
from loadtests.helpers.response import envelope_data, extract_error_detail
from loadtests.helpers.state import CartState, OrderState


class CheckoutJourney(SequentialTaskSet):
    """Open Cart -> Add Items -> Update Quantity -> Discount -> Checkout -> Pay/Cancel -> Read."""

    def on_start(self):
        self.cart = CartState()
        self.order = OrderState()

    @task
    def open_cart(self):
        with self.client.get(
            f"/cart?lang={language()}",
            headers=self.user.headers,
            catch_response=True,
            name="GET /cart",
        ) as resp:
            if resp.status_code == 200:
                self.cart.cart_id = envelope_data(resp, "cart").get("id")
            else:
                resp.failure(f"Open cart failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_items(self):
        with self.client.post(
            "/cart",
            json={"items": cart_items(random.randint(1, 3))},
            headers=self.user.headers,
            catch_response=True,
            name="POST /cart",
        ) as resp:
            if resp.status_code == 201:
                cart = envelope_data(resp, "cart")
                self.cart.product_ids = [item["product"]["id"] for item in cart.get("items", [])]
                self.cart.total_quantity = cart.get("totalQuantity", 0)
            else:
                resp.failure(f"Add items failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def update_quantity(self):
        if not self.cart.product_ids:
            return
        product_id = random.choice(self.cart.product_ids)
        with self.client.patch(
            f"/cart/{product_id}",
            json={"quantity": 1},
            headers=self.user.headers,
            catch_response=True,
            name="PATCH /cart/{productId}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def add_cart_notes(self):
        with self.client.patch(
            "/cart/notes",
            json={"notes": localized("Leave at the door", "اترك الطلب عند الباب")},
            headers=self.user.headers,
            catch_response=True,
            name="PATCH /cart/notes",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cart notes failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def maybe_discount(self):
        if random.random() > 0.3:
            return
        with self.client.patch(
            "/cart/discount",
            json=discount_data(),
            headers=self.user.headers,
            catch_response=True,
            name="PATCH /cart/discount",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Discount failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            "/cart/checkout",
            json=checkout_data(),
            headers=self.user.headers,
            catch_response=True,
            name="POST /cart/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.order.order_id = envelope_data(resp, "order").get("id")
            else:
                resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay_or_cancel(self):
        if random.random() < 0.8:
            action, expected = "pay", "paid"
        else:
            action, expected = "cancel", "cancelled"
        with self.client.patch(
            f"/orders/{self.order.order_id}/{action}",
            headers=self.user.headers,
            catch_response=True,
            name=f"PATCH /orders/{{id}}/{action}",
        ) as resp:
            if resp.status_code == 200:
                order = envelope_data(resp, "order")
                self.order.current_status = order.get("status", self.order.current_status)
                self.order.payment_status = order.get("paymentStatus", self.order.payment_status)
                if expected not in (self.order.current_status, self.order.payment_status):
                    resp.failure(f"Expected {expected} after {action}")
            else:
                resp.failure(f"{action.title()} failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def read_order(self):
        with self.client.get(
            f"/orders/{self.order.order_id}?lang={language()}",
            headers=self.user.headers,
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read order failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def my_orders(self):
        with self.client.get(
            "/orders/myorders",
            headers=self.user.headers,
            catch_response=True,
            name="GET /orders/myorders",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"My orders failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """A signed-in customer shopping and checking out."""

    tasks = [CheckoutJourney]
    wait_time = between(0.5, 2.0)
    weight = 5

    def on_start(self):
        self.headers = {"Authorization": f"Bearer {random.choice(customer_tokens())}"}


class AdminUser(HttpUser):
    """Back-office staff reviewing carts and shipping paid orders."""

    wait_time = between(1.0, 3.0)
    weight = 1

    def on_start(self):
        self.headers = {"Authorization": f"Bearer {admin_token()}"}

    @task(3)
    def list_orders(self):
        with self.client.get(
            f"/orders/all?page=1&limit=20&paymentStatus=paid&lang={language()}",
            headers=self.headers,
            catch_response=True,
            name="GET /orders/all",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code}: {extract_error_detail(resp)}")
                return
            self._ship_one([o for o in envelope_data(resp, "orders") or [] if o.get("status") == "processing"])

    def _ship_one(self, orders):
        if not orders:
            return
        order = random.choice(orders)
        with self.client.patch(
            f"/orders/{order['id']}/status",
            json={"status": "shipped"},
            headers=self.headers,
            catch_response=True,
            name="PATCH /orders/{id}/status",
        ) as resp:
            # Another admin may have shipped it first
            if resp.status_code not in (200, 400):
                resp.failure(f"Ship failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task(1)
    def list_carts(self):
        with self.client.get(
            "/cart/admin",
            headers=self.headers,
            catch_response=True,
            name="GET /cart/admin",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List carts failed: {resp.status_code}: {extract_error_detail(resp)}")
