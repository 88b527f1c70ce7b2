import core.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('couriers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.CharField(default=core.models.new_identifier, editable=False, max_length=64, primary_key=True, serialize=False)),
                ('sequence', models.PositiveBigIntegerField(db_index=True, editable=False, help_text='Insertion order; newest batches come first', verbose_name='sequence')),
                ('pgfn_initial', models.PositiveIntegerField(default=0, verbose_name='PGFN notifications')),
                ('normal_initial', models.PositiveIntegerField(default=0, verbose_name='normal notifications')),
                ('departure_datetime', models.DateTimeField(verbose_name='departure')),
                ('estimated_return_date', models.DateField(help_text='Only used to flag overdue batches', verbose_name='estimated return date')),
                ('description', models.TextField(blank=True, default='', verbose_name='description')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('finalized', 'Finalized')], db_index=True, default='pending', max_length=10, verbose_name='status')),
                ('pgfn_delivered', models.PositiveIntegerField(blank=True, null=True, verbose_name='PGFN delivered')),
                ('pgfn_returned', models.PositiveIntegerField(blank=True, null=True, verbose_name='PGFN returned')),
                ('pgfn_absent', models.PositiveIntegerField(blank=True, null=True, verbose_name='PGFN absent')),
                ('normal_delivered', models.PositiveIntegerField(blank=True, null=True, verbose_name='normal delivered')),
                ('normal_returned', models.PositiveIntegerField(blank=True, null=True, verbose_name='normal returned')),
                ('normal_absent', models.PositiveIntegerField(blank=True, null=True, verbose_name='normal absent')),
                ('total_value', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='total value')),
                ('return_datetime', models.DateTimeField(blank=True, null=True, verbose_name='returned at')),
                ('delivery_person', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='batches', to='couriers.deliveryperson', verbose_name='delivery person')),
            ],
            options={
                'verbose_name': 'batch',
                'verbose_name_plural': 'batches',
                'ordering': ['-sequence'],
                'indexes': [
                    models.Index(fields=['delivery_person', 'status'], name='batches_bat_deliver_7d3f1a_idx'),
                    models.Index(fields=['status', 'return_datetime'], name='batches_bat_status_2b8e4c_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('pgfn_initial__gt', 0), ('normal_initial__gt', 0), _connector='OR'),
                        name='batch_has_notifications',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ('status', 'pending'),
                            ('pgfn_initial', models.F('pgfn_delivered') + models.F('pgfn_returned') + models.F('pgfn_absent')),
                            _connector='OR',
                        ),
                        name='batch_pgfn_conserved',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ('status', 'pending'),
                            ('normal_initial', models.F('normal_delivered') + models.F('normal_returned') + models.F('normal_absent')),
                            _connector='OR',
                        ),
                        name='batch_normal_conserved',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(('status', 'pending'), ('return_datetime__isnull', False), _connector='OR'),
                        name='batch_finalized_has_return',
                    ),
                ],
            },
        ),
    ]
