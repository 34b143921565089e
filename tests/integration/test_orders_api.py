"""
Integration tests for sales orders: create, edit, templates and atomic line replacement.
"""

import pytest
from decimal import Decimal

from solestock.models import SalesOrder, SalesOrderLine
from solestock.services import order_service


class TestCreateOrder:
    """POST /api/orders"""

    def test_create_order_stores_flat_lines(self, client, session, company_headers, order_payload):
        response = client.post('/api/orders', json=order_payload, headers=company_headers)

        assert response.status_code == 201
        data = response.get_json()
        assert data['order_no'] == 'SO-00001'
        assert data['total_pairs'] == 6
        assert Decimal(data['grand_total']) == Decimal('75')
        assert Decimal(data['tax_total']) == Decimal('0')
        assert data['grand_total_display'] == '75.00'

        lines = session.query(SalesOrderLine).filter_by(order_id=data['id']).order_by(SalesOrderLine.line_no).all()
        assert [line.line_no for line in lines] == [1, 2, 3]
        assert [line.description for line in lines] == [
            'A100 - Black - Size 40',
            'A100 - Black - Size 42',
            'B200 - Brown - Size 39',
        ]

    def test_detail_regroups_lines(self, client, company_headers, order_payload):
        order_id = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()['id']

        data = client.get(f'/api/orders/{order_id}', headers=company_headers).get_json()

        assert [(line['product_code'], line['color']) for line in data['lines']] == [
            ('A100', 'Black'), ('B200', 'Brown')
        ]
        assert data['lines'][0]['sizes']['40'] == 2
        assert data['lines'][0]['sizes']['42'] == 1
        assert data['lines'][1]['total_pairs'] == 3

    def test_order_numbers_increase(self, client, company_headers, order_payload):
        client.post('/api/orders', json=order_payload, headers=company_headers)
        data = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()

        assert data['order_no'] == 'SO-00002'

    def test_order_without_pairs_is_rejected(self, client, company_headers, customer1):
        payload = {
            'customer_id': customer1.id,
            'lines': [{'product_code': 'A100', 'color': 'Black', 'sizes': {}, 'unit_price': 10}],
        }

        response = client.post('/api/orders', json=payload, headers=company_headers)

        assert response.status_code == 400
        assert response.get_json()['status'] == 'error'

    def test_unknown_size_is_rejected(self, client, company_headers, customer1):
        payload = {
            'customer_id': customer1.id,
            'lines': [{'product_code': 'A100', 'sizes': {'47': 1}, 'unit_price': 10}],
        }

        response = client.post('/api/orders', json=payload, headers=company_headers)

        assert response.status_code == 400
        assert 'unknown size' in response.get_json()['message']

    def test_missing_company_is_forbidden(self, client, order_payload):
        response = client.post('/api/orders', json=order_payload)

        assert response.status_code == 403

    def test_flat_discount(self, client, company_headers, order_payload):
        order_payload['discount'] = '5'

        data = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()

        assert Decimal(data['discount']) == Decimal('5')
        assert Decimal(data['grand_total']) == Decimal('70')


class TestUpdateOrder:
    """PUT /api/orders/<id> replaces every line."""

    def test_update_replaces_lines(self, client, session, company_headers, order_payload):
        order_id = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()['id']

        payload = {
            'notes': 'Rush delivery',
            'lines': [{'product_code': 'C300', 'color': 'White', 'sizes': {'44': 4}, 'unit_price': '30'}],
        }
        response = client.put(f'/api/orders/{order_id}', json=payload, headers=company_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['notes'] == 'Rush delivery'
        assert Decimal(data['grand_total']) == Decimal('120')

        lines = session.query(SalesOrderLine).filter_by(order_id=order_id).all()
        assert len(lines) == 1
        assert lines[0].line_no == 1
        assert lines[0].description == 'C300 - White - Size 44'

    def test_header_only_update_keeps_lines(self, client, session, company_headers, order_payload):
        order_id = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()['id']

        response = client.patch(f'/api/orders/{order_id}', json={'status': 'approved'}, headers=company_headers)

        assert response.status_code == 200
        assert response.get_json()['status'] == 'approved'
        assert session.query(SalesOrderLine).filter_by(order_id=order_id).count() == 3

    def test_invalid_update_leaves_order_untouched(self, client, session, company_headers, order_payload):
        order_id = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()['id']

        payload = {
            'notes': 'should not stick',
            'lines': [{'product_code': 'C300', 'sizes': {'40': -2}, 'unit_price': 30}],
        }
        response = client.put(f'/api/orders/{order_id}', json=payload, headers=company_headers)

        assert response.status_code == 400
        order = session.get(SalesOrder, order_id)
        assert order.notes is None
        assert len(order.lines) == 3

    def test_failure_after_line_swap_rolls_back(self, session, ctx1, order_payload, monkeypatch):
        order_id = order_service.create_order(ctx1, order_payload, session)
        original_replace = order_service.replace_lines

        def failing_replace(document, new_lines):
            original_replace(document, new_lines)
            raise RuntimeError('connection lost')

        monkeypatch.setattr(order_service, 'replace_lines', failing_replace)

        with pytest.raises(RuntimeError):
            order_service.update_order(ctx1, order_id, {
                'notes': 'lost',
                'lines': [{'product_code': 'C300', 'sizes': {'40': 1}, 'unit_price': 30}],
            }, session)

        order = session.get(SalesOrder, order_id)
        assert order.notes is None
        assert Decimal(order.grand_total) == Decimal('75')
        assert sorted(line.description for line in order.lines) == [
            'A100 - Black - Size 40',
            'A100 - Black - Size 42',
            'B200 - Brown - Size 39',
        ]

    def test_delete_order_removes_lines(self, client, session, company_headers, order_payload):
        order_id = client.post('/api/orders', json=order_payload, headers=company_headers).get_json()['id']

        response = client.delete(f'/api/orders/{order_id}', headers=company_headers)

        assert response.status_code == 200
        assert session.query(SalesOrderLine).filter_by(order_id=order_id).count() == 0
        assert client.get(f'/api/orders/{order_id}', headers=company_headers).status_code == 404


class TestOrderTemplates:
    """Templates and orders started from them."""

    def _template_payload(self, customer_id=None):
        return {
            'template_name': 'Spring re-order',
            'customer_id': customer_id,
            'terms': 'Net 30',
            'lines': [
                {'product_code': 'A100', 'color': 'Black', 'sizes': {'41': 2, '43': 2}, 'unit_price': 10,
                 'tax_rate': 21},
                {'product_code': 'D400', 'color': 'Red', 'sizes': {}, 'unit_price': 18},
            ],
        }

    def test_template_keeps_rows_without_pairs(self, client, company_headers, customer1):
        response = client.post('/api/templates', json=self._template_payload(customer1.id), headers=company_headers)

        assert response.status_code == 201
        data = response.get_json()
        assert len(data['lines']) == 2
        assert Decimal(data['totals']['tax_total']) == Decimal('8.4')

    def test_template_requires_name(self, client, company_headers):
        payload = self._template_payload()
        payload['template_name'] = ' '

        assert client.post('/api/templates', json=payload, headers=company_headers).status_code == 400

    def test_order_from_template(self, client, session, company_headers, customer1):
        template = client.post(
            '/api/templates', json=self._template_payload(customer1.id), headers=company_headers
        ).get_json()

        response = client.post(f"/api/orders/from-template/{template['id']}", json={}, headers=company_headers)

        assert response.status_code == 201
        data = response.get_json()
        assert data['template_id'] == template['id']
        assert data['customer_id'] == customer1.id
        assert data['terms'] == 'Net 30'
        assert data['total_pairs'] == 4
        assert Decimal(data['tax_total']) == Decimal('0')
        assert Decimal(data['grand_total']) == Decimal('40')
        assert [line['product_code'] for line in data['lines']] == ['A100']

    def test_order_from_template_needs_customer(self, client, company_headers):
        template = client.post('/api/templates', json=self._template_payload(), headers=company_headers).get_json()

        response = client.post(f"/api/orders/from-template/{template['id']}", json={}, headers=company_headers)

        assert response.status_code == 400
        assert 'customer_id' in response.get_json()['message']
