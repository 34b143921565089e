"""
Integration tests for stock by size: manual adjustments and the stock moved
by invoices, bills and return notes.
"""

import pytest

from solestock.exceptions import NotFoundError
from solestock.models import StockBySize
from solestock.services import invoice_service
from solestock.services.stock_service import STOCK_IN, STOCK_OUT, get_item_stock, stock_deltas
from solestock.services.size_matrix import GroupedLine


def _stock(client, headers, item_id):
    response = client.get(f'/api/stock/{item_id}', headers=headers)
    assert response.status_code == 200
    return response.get_json()['sizes']


def _lines(sizes, code='A100', color='Black', unit_price='20'):
    return [{'product_code': code, 'color': color, 'sizes': sizes, 'unit_price': unit_price}]


@pytest.fixture
def received(client, company_headers, supplier1, item1):
    """A bill that brought in six pairs each of A100/Black 39 and 40."""
    payload = {'supplier_id': supplier1.id, 'bill_no': 'F-100', 'lines': _lines({'39': 6, '40': 6}, unit_price='12')}
    response = client.post('/api/bills', json=payload, headers=company_headers)
    assert response.status_code == 201
    return response.get_json()


class TestStockDeltas:
    """Net change between a document's old and new lines."""

    def test_new_document(self):
        new = [GroupedLine(product_code='A1', color='Red', sizes={'39': 2, '41': 1})]

        assert stock_deltas([], new, STOCK_OUT) == {('A1', 'Red', '39'): -2, ('A1', 'Red', '41'): -1}

    def test_only_the_difference_moves(self):
        old = [GroupedLine(product_code='A1', color='Red', sizes={'39': 2, '41': 1})]
        new = [GroupedLine(product_code='A1', color='Red', sizes={'39': 3, '41': 1})]

        assert stock_deltas(old, new, STOCK_IN) == {('A1', 'Red', '39'): 1}

    def test_removed_lines_are_reversed(self):
        old = [GroupedLine(product_code='A1', color='Red', sizes={'40': 4})]

        assert stock_deltas(old, [], STOCK_OUT) == {('A1', 'Red', '40'): 4}


class TestManualAdjustment:
    """Stock edited by hand adds to what is on hand."""

    def test_adjust_is_additive(self, client, company_headers, item1):
        client.post('/api/stock/adjust', json={'item_id': item1.id, 'sizes': {'41': 5}}, headers=company_headers)

        response = client.post(
            '/api/stock/adjust', json={'item_id': item1.id, 'sizes': {'41': -2, '42': 1}}, headers=company_headers
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data['sizes']['41'] == 3
        assert data['sizes']['42'] == 1
        assert data['total_pairs'] == 4

    @pytest.mark.parametrize('sizes', [{}, {'46': 1}, {'40': 1.5}, {'40': 0}])
    def test_invalid_adjustments(self, client, company_headers, item1, sizes):
        response = client.post('/api/stock/adjust', json={'item_id': item1.id, 'sizes': sizes},
                               headers=company_headers)

        assert response.status_code == 400

    def test_list_filters_by_code_and_color(self, client, company_headers, item1):
        client.post('/api/items', json={'code': 'A100', 'name': 'Oxford', 'color': 'Brown'}, headers=company_headers)

        stock = client.get('/api/stock?code=A100&color=Black', headers=company_headers).get_json()['stock']

        assert [(row['code'], row['color']) for row in stock] == [('A100', 'Black')]
        assert stock[0]['sizes'] == {size: 0 for size in ('39', '40', '41', '42', '43', '44', '45')}

    def test_other_company_item_is_not_found(self, session, ctx2, item1):
        with pytest.raises(NotFoundError):
            get_item_stock(ctx2, item1.id, session)


class TestDocumentStock:
    """Invoices take pairs out; bills and return notes put them back."""

    def test_bill_receives_stock(self, client, company_headers, item1, received):
        sizes = _stock(client, company_headers, item1.id)

        assert (sizes['39'], sizes['40'], sizes['41']) == (6, 6, 0)

    def test_invoice_deducts_and_update_moves_the_difference(self, client, company_headers, customer1, item1,
                                                             received):
        invoice = client.post('/api/invoices', json={'customer_id': customer1.id, 'lines': _lines({'39': 2})},
                              headers=company_headers).get_json()
        assert _stock(client, company_headers, item1.id)['39'] == 4

        client.put(f"/api/invoices/{invoice['id']}", json={'lines': _lines({'40': 1})}, headers=company_headers)

        sizes = _stock(client, company_headers, item1.id)
        assert (sizes['39'], sizes['40']) == (6, 5)

    def test_header_only_update_leaves_stock(self, client, company_headers, customer1, item1, received):
        invoice = client.post('/api/invoices', json={'customer_id': customer1.id, 'lines': _lines({'39': 2})},
                              headers=company_headers).get_json()

        client.patch(f"/api/invoices/{invoice['id']}", json={'notes': 'Call first'}, headers=company_headers)

        assert _stock(client, company_headers, item1.id)['39'] == 4

    def test_deleting_invoice_restores_stock(self, client, company_headers, customer1, item1, received):
        invoice = client.post('/api/invoices', json={'customer_id': customer1.id, 'lines': _lines({'40': 3})},
                              headers=company_headers).get_json()

        client.delete(f"/api/invoices/{invoice['id']}", headers=company_headers)

        assert _stock(client, company_headers, item1.id)['40'] == 6

    def test_invoicing_beyond_stock_goes_negative(self, client, company_headers, customer1, item1):
        response = client.post('/api/invoices', json={'customer_id': customer1.id, 'lines': _lines({'44': 2})},
                               headers=company_headers)

        assert response.status_code == 201
        assert _stock(client, company_headers, item1.id)['44'] == -2

    def test_return_note_restores_and_delete_reverses(self, client, company_headers, customer1, item1):
        note = client.post('/api/return-notes', json={'customer_id': customer1.id, 'lines': _lines({'42': 2})},
                           headers=company_headers).get_json()
        assert _stock(client, company_headers, item1.id)['42'] == 2

        client.delete(f"/api/return-notes/{note['id']}", headers=company_headers)

        assert _stock(client, company_headers, item1.id)['42'] == 0

    def test_deleting_bill_removes_received_stock(self, client, company_headers, item1, received):
        client.delete(f"/api/bills/{received['id']}", headers=company_headers)

        sizes = _stock(client, company_headers, item1.id)
        assert (sizes['39'], sizes['40']) == (0, 0)

    def test_lines_without_catalog_item_move_nothing(self, session, client, company_headers, customer1, item1):
        payload = {'customer_id': customer1.id, 'lines': _lines({'39': 1}, code='Z999', color='Pink')}

        assert client.post('/api/invoices', json=payload, headers=company_headers).status_code == 201
        assert session.query(StockBySize).count() == 0

    def test_failed_save_leaves_stock_untouched(self, session, ctx1, customer1, item1, received, monkeypatch):
        def failing_replace(document, new_lines):
            raise RuntimeError('connection lost')

        monkeypatch.setattr(invoice_service, 'replace_lines', failing_replace)

        with pytest.raises(RuntimeError):
            invoice_service.create_invoice(ctx1, {'customer_id': customer1.id, 'lines': _lines({'39': 5})}, session)

        assert get_item_stock(ctx1, item1.id, session)['sizes']['39'] == 6
