from __future__ import annotations
import os
import sys
from datetime import datetime
from faker import Faker

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from newsapp import create_app
from newsapp.models import db, NewsPost, Account, ADMIN, Role

fake = Faker()


def seed_posts(n: int = 50) -> None:
    """Seed the database with ``n`` news posts attributed to the admin."""
    app = create_app(os.environ.get('NEWSAPP_CONFIG', 'config.DevelopmentConfig'))
    with app.app_context():
        db.create_all()
        admin = Account.query.join(Account.roles).filter(Role.name == ADMIN).first()
        for _ in range(n):
            created = fake.date_time_between(start_date='-1y', end_date=datetime.now())
            db.session.add(NewsPost(title=fake.sentence(nb_words=8).rstrip('.'),
                                    content='\n\n'.join(fake.paragraphs(nb=4)),
                                    created_at=created,
                                    updated_at=created,
                                    author_id=admin.id if admin else None))
        db.session.commit()
        print(f"Seeded {n} news posts")


if __name__ == '__main__':
    seed_posts(int(sys.argv[1]) if len(sys.argv) > 1 else 50)
