from datetime import datetime
from types import SimpleNamespace

from booking_api.models.course import Course
from booking_api.models.payment import Payment
from booking_api.models.selection import Selection
from booking_api.payments import stripe_client


def test_create_payment_intent_returns_client_secret(client, monkeypatch, auth_headers) -> None:
    captured = {}

    def fake_create_payment_intent(amount, currency=None, metadata=None):
        captured.update(amount=amount, metadata=metadata)
        return SimpleNamespace(id='pi_123', client_secret='pi_123_secret_abc')

    monkeypatch.setattr(stripe_client, 'create_payment_intent', fake_create_payment_intent)

    response = client.post('/createPaymentIntent', headers=auth_headers('s@x.com'), json={'price': 49.99})

    assert response.status_code == 200
    assert response.json() == {'clientSecret': 'pi_123_secret_abc'}
    assert captured == {'amount': 4999, 'metadata': {'email': 's@x.com'}}


def test_create_payment_intent_accepts_total_price_alias(client, monkeypatch, auth_headers) -> None:
    monkeypatch.setattr(
        stripe_client,
        'create_payment_intent',
        lambda amount, currency=None, metadata=None: SimpleNamespace(client_secret=f'secret_{amount}'),
    )

    response = client.post('/createPaymentIntent', headers=auth_headers('s@x.com'), json={'totalPrice': 120})

    assert response.json() == {'clientSecret': 'secret_12000'}


def test_create_payment_intent_rejects_non_positive_price(client, auth_headers) -> None:
    response = client.post('/createPaymentIntent', headers=auth_headers('s@x.com'), json={'price': 0})

    assert response.status_code == 422


def test_create_payment_intent_without_stripe_key_is_unavailable(client, monkeypatch, auth_headers) -> None:
    monkeypatch.setattr(stripe_client.config, 'STRIPE_SECRET_KEY', '')

    response = client.post('/createPaymentIntent', headers=auth_headers('s@x.com'), json={'price': 10})

    assert response.status_code == 503
    assert response.json()['error'] is True


def test_payment_finalizes_single_seat(client, db, make_class, make_selection, auth_headers) -> None:
    course = make_class(available_seats=30, price=50)
    selection = make_selection('s@x.com', course)
    selection_id = selection.id

    response = client.post(
        '/payments',
        headers=auth_headers('s@x.com'),
        json={
            'email': 's@x.com',
            'price': 50,
            'transactionId': 'pi_123',
            'classId': course.id,
            'selectionId': selection_id,
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body['insertResult']['insertedId'] is not None
    assert body['deleteResult'] == {'acknowledged': True, 'deletedCount': 1}
    assert body['patchResult']['modifiedCount'] == 1

    db.expire_all()
    stored = db.get(Course, course.id)
    assert stored.available_seats == 29
    assert stored.enrolled == 1
    assert db.get(Selection, selection_id) is None


def test_payment_for_other_student_is_forbidden(client, db, make_class, make_selection, auth_headers) -> None:
    course = make_class()
    selection = make_selection('victim@x.com', course)

    response = client.post(
        '/payments',
        headers=auth_headers('s@x.com'),
        json={'email': 'victim@x.com', 'price': 50, 'classIds': [course.id], 'selectionIds': [selection.id]},
    )

    assert response.status_code == 403
    assert db.query(Payment).count() == 0


def test_sold_out_class_rolls_back_whole_payment(client, db, make_class, make_selection, auth_headers) -> None:
    open_course = make_class(name='Open', available_seats=5)
    full_course = make_class(name='Full', available_seats=0, enrolled=20)
    open_selection = make_selection('s@x.com', open_course)
    full_selection = make_selection('s@x.com', full_course)

    response = client.post(
        '/payments',
        headers=auth_headers('s@x.com'),
        json={
            'email': 's@x.com',
            'price': 100,
            'classIds': [open_course.id, full_course.id],
            'selectionIds': [open_selection.id, full_selection.id],
        },
    )

    assert response.status_code == 409
    db.expire_all()
    assert db.query(Payment).count() == 0
    assert db.get(Course, open_course.id).available_seats == 5
    assert db.get(Course, full_course.id).available_seats == 0
    assert db.query(Selection).count() == 2


def test_list_payments_sorted_newest_first(client, db, auth_headers) -> None:
    db.add_all([
        Payment(email='s@x.com', price=10, date=datetime(2026, 1, 1), class_ids=[1], selection_ids=[1]),
        Payment(email='s@x.com', price=30, date=datetime(2026, 3, 1), class_ids=[3], selection_ids=[3]),
        Payment(email='s@x.com', price=20, date=datetime(2026, 2, 1), class_ids=[2], selection_ids=[2]),
        Payment(email='other@x.com', price=99, date=datetime(2026, 4, 1), class_ids=[4], selection_ids=[4]),
    ])
    db.commit()

    response = client.get('/payments', params={'email': 's@x.com'}, headers=auth_headers('s@x.com'))

    assert response.status_code == 200
    assert [item['price'] for item in response.json()] == [30.0, 20.0, 10.0]
    assert response.json()[0]['classIds'] == [3]


def test_list_payments_rejects_other_email(client, auth_headers) -> None:
    response = client.get('/payments', params={'email': 'other@x.com'}, headers=auth_headers('s@x.com'))

    assert response.status_code == 403
