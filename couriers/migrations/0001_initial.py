import core.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='DeliveryPerson',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.CharField(default=core.models.new_identifier, editable=False, max_length=64, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255, verbose_name='full name')),
                ('cpf', models.CharField(blank=True, default='', max_length=32, verbose_name='CPF')),
                ('address', models.CharField(blank=True, default='', max_length=255, verbose_name='address')),
                ('phone', models.CharField(blank=True, default='', max_length=32, verbose_name='phone')),
                ('whatsapp', models.CharField(blank=True, default='', max_length=32, verbose_name='WhatsApp')),
                ('pix', models.CharField(blank=True, default='', help_text='Payment key used to pay the courier', max_length=140, verbose_name='PIX key')),
                ('route', models.CharField(blank=True, default='', help_text='Preferred delivery route', max_length=255, verbose_name='route')),
            ],
            options={
                'verbose_name': 'delivery person',
                'verbose_name_plural': 'delivery people',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['name'], name='couriers_de_name_5c1a2e_idx')],
            },
        ),
    ]
