import pytest
import uuid
from decimal import Decimal

from solestock import create_app
from solestock.context import CompanyContext
from solestock.database import create_all, drop_all, get_session
from solestock.models import Company, Contact, ContactType, Item


@pytest.fixture(scope='function')
def app():
    """Application on a fresh in-memory database, with an app context pushed."""
    app = create_app('config.TestConfig')
    with app.app_context():
        create_all()
        yield app
        get_session().remove()
        drop_all()


@pytest.fixture(scope='function')
def session(app):
    """Database session for testing."""
    session = get_session()
    yield session
    session.rollback()


def _company(session, label):
    company = Company(name=f'{label} {str(uuid.uuid4())[:8]}', active=True)
    session.add(company)
    session.commit()
    return company


@pytest.fixture(scope='function')
def company1(session):
    """First test company."""
    return _company(session, 'Shoe Co')


@pytest.fixture(scope='function')
def company2(session):
    """Second test company for isolation tests."""
    return _company(session, 'Other Shoes')


@pytest.fixture(scope='function')
def ctx1(company1):
    return CompanyContext(company_id=company1.id, company_name=company1.name)


@pytest.fixture(scope='function')
def ctx2(company2):
    return CompanyContext(company_id=company2.id, company_name=company2.name)


@pytest.fixture(scope='function')
def customer1(session, company1):
    customer = Contact(company_id=company1.id, contact_type=ContactType.CUSTOMER.value, name='Walk-in Retail')
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture(scope='function')
def supplier1(session, company1):
    supplier = Contact(company_id=company1.id, contact_type=ContactType.SUPPLIER.value, name='Leather Works')
    session.add(supplier)
    session.commit()
    return supplier


@pytest.fixture(scope='function')
def customer2(session, company2):
    customer = Contact(company_id=company2.id, contact_type=ContactType.CUSTOMER.value, name='Other Retail')
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture(scope='function')
def item1(session, company1):
    item = Item(
        company_id=company1.id,
        code='A100',
        name='Oxford',
        color='Black',
        sale_price=Decimal('20.00'),
        purchase_price=Decimal('12.00'),
    )
    session.add(item)
    session.commit()
    return item


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def company_headers(company1):
    """Headers scoping API requests to company1."""
    return {'X-Company-Id': str(company1.id)}


@pytest.fixture
def order_payload(customer1):
    """Two grouped lines: A100/Black sizes 40 and 42, B200/Brown size 39."""
    return {
        'customer_id': customer1.id,
        'order_date': '2024-03-01',
        'lines': [
            {'product_code': 'A100', 'color': 'Black', 'sizes': {'40': 2, '42': 1}, 'unit_price': '10.00'},
            {'product_code': 'B200', 'color': 'Brown', 'sizes': {'39': 3}, 'unit_price': '15.00'},
        ],
    }
