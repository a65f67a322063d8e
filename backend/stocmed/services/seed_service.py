"""Seed service for initial data"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import select

from stocmed.core.database import AsyncSessionLocal
from stocmed.models.account import Account
from stocmed.models.drug import Drug
from stocmed.models.pharmacy import Pharmacy

logger = logging.getLogger(__name__)


async def seed_data():
    """Seed sample Lagos pharmacies and drugs if empty"""
    async with AsyncSessionLocal() as db:
        # Check if already seeded
        result = await db.execute(select(Pharmacy).limit(1))
        if result.scalar_one_or_none():
            return  # Already seeded

        accounts = [
            Account(id='seed-owner-ikeja', email='ikeja@example.com', role='pharmacy', pharmacy_id='seed-ph-ikeja'),
            Account(id='seed-owner-yaba', email='yaba@example.com', role='pharmacy', pharmacy_id='seed-ph-yaba'),
            Account(id='seed-owner-lekki', email='lekki@example.com', role='pharmacy', pharmacy_id='seed-ph-lekki'),
            Account(id='seed-owner-surulere', email='surulere@example.com', role='pharmacy', pharmacy_id='seed-ph-surulere'),
            Account(
                id='seed-owner-pending',
                email='pending@example.com',
                role='pharmacy',
                pending_pharmacy_profile={
                    'pharmacy_name': 'Ajah Community Pharmacy',
                    'license_number': 'PCN-LAG-0099',
                    'address': '12 Addo Road',
                    'city': 'Ajah',
                    'state': 'Lagos',
                    'phone': '+2348000000099',
                },
            ),
            Account(id='seed-patient', email='patient@example.com', role='patient'),
        ]

        pharmacies = [
            Pharmacy(id='seed-ph-ikeja', user_id='seed-owner-ikeja', pharmacy_name='Ikeja Health Pharmacy', license_number='PCN-LAG-0001', address='5 Allen Avenue', city='Ikeja', state='Lagos', phone='+2348000000001', latitude=Decimal('6.6018'), longitude=Decimal('3.3515'), is_verified=True),
            Pharmacy(id='seed-ph-yaba', user_id='seed-owner-yaba', pharmacy_name='Yaba Care Pharmacy', license_number='PCN-LAG-0002', address='21 Herbert Macaulay Way', city='Yaba', state='Lagos', phone='+2348000000002', latitude=Decimal('6.5095'), longitude=Decimal('3.3711')),
            Pharmacy(id='seed-ph-lekki', user_id='seed-owner-lekki', pharmacy_name='Lekki Wellness Pharmacy', license_number='PCN-LAG-0003', address='Admiralty Way', city='Lekki', state='Lagos', phone='+2348000000003'),
            # Paused listing, never shown in search
            Pharmacy(id='seed-ph-surulere', user_id='seed-owner-surulere', pharmacy_name='Surulere Drugs', license_number='PCN-LAG-0004', address='Adeniran Ogunsanya Street', city='Surulere', state='Lagos', phone='+2348000000004', latitude=Decimal('6.4926'), longitude=Decimal('3.3566'), is_active=False),
        ]

        now = datetime.utcnow()
        drugs = [
            Drug(pharmacy_id='seed-ph-ikeja', name='Paracetamol 500mg', generic_name='Paracetamol', brand_name='Panadol', category='Pain Relief', dosage_form='Tablet', strength='500mg', price=Decimal('500'), quantity_in_stock=120, manufacturer='GSK', updated_at=now),
            Drug(pharmacy_id='seed-ph-yaba', name='Paracetamol 500mg', generic_name='Paracetamol', brand_name='Emzor Paracetamol', category='Pain Relief', dosage_form='Tablet', strength='500mg', price=Decimal('450'), quantity_in_stock=8, manufacturer='Emzor', updated_at=now - timedelta(hours=1)),
            Drug(pharmacy_id='seed-ph-lekki', name='Amoxicillin 500mg', generic_name='Amoxicillin', brand_name='Amoxil', category='Antibiotics', dosage_form='Capsule', strength='500mg', price=Decimal('1200'), quantity_in_stock=40, requires_prescription=True, manufacturer='GSK', updated_at=now - timedelta(hours=2)),
            Drug(pharmacy_id='seed-ph-yaba', name='Artemether/Lumefantrine', generic_name='Artemether', brand_name='Coartem', category='Antimalarial', dosage_form='Tablet', strength='20/120mg', price=Decimal('2500'), quantity_in_stock=0, manufacturer='Novartis', updated_at=now - timedelta(hours=3)),
            Drug(pharmacy_id='seed-ph-surulere', name='Paracetamol 500mg', generic_name='Paracetamol', brand_name='Panadol', category='Pain Relief', dosage_form='Tablet', strength='500mg', price=Decimal('400'), quantity_in_stock=300, manufacturer='GSK', updated_at=now),
        ]

        db.add_all(accounts)
        db.add_all(pharmacies)
        await db.flush()
        db.add_all(drugs)
        await db.commit()
        logger.info("Database seeded with sample data")
