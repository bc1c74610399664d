"""Cliente MQTT para recepción de lecturas."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import paho.mqtt.client as mqtt

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str, bytes], None]


class MQTTClient:
    """Cliente MQTT ligero para recepción de lecturas.

    Responsabilidades:
    - Conexión/desconexión a broker MQTT (TLS opcional con certificado cliente)
    - Suscripción al prefijo de topics
    - Delegación de mensajes a handler

    La reconexión es la que hace paho por su cuenta en loop_start().
    """

    CONNECT_WAIT_STEPS = 50
    CONNECT_WAIT_STEP = 0.1

    def __init__(
        self,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        subscription: str = "#",
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: str = "temperature-exporter",
        use_tls: bool = False,
        ca_chain: Optional[str] = None,
        client_cert: Optional[str] = None,
        client_key: Optional[str] = None,
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.subscription = subscription
        self.username = username
        self.password = password
        self.client_id = client_id
        self.use_tls = use_tls
        self.ca_chain = ca_chain
        self.client_cert = client_cert
        self.client_key = client_key

        self._client: Optional[mqtt.Client] = None
        self._connected = False
        self._message_handler: Optional[MessageCallback] = None
        self._reconnect_count = 0

    @classmethod
    def from_settings(cls, settings, subscription: str) -> "MQTTClient":
        return cls(
            broker_host=settings.broker_host,
            broker_port=settings.broker_port,
            subscription=subscription,
            username=settings.username,
            password=settings.password,
            client_id=f"{settings.client_name}-prometheus",
            use_tls=settings.use_tls,
            ca_chain=settings.ca_chain,
            client_cert=settings.client_cert,
            client_key=settings.client_key,
        )

    def set_message_handler(self, handler: MessageCallback):
        """Configura el handler de mensajes."""
        self._message_handler = handler

    def _build_client(self) -> mqtt.Client:
        client = mqtt.Client(
            client_id=self.client_id,
            protocol=mqtt.MQTTv311,
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        )
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message

        if self.username:
            client.username_pw_set(self.username, self.password)

        if self.use_tls:
            self._configure_tls(client)
        return client

    def _configure_tls(self, client: mqtt.Client) -> None:
        # La cadena CA solo se usa para verificar al broker.
        ca_certs = self.ca_chain if self.ca_chain and Path(self.ca_chain).is_file() else None
        if self.ca_chain and ca_certs is None:
            logger.warning("[MQTT] CA chain not found: %s, using system roots", self.ca_chain)

        certfile = keyfile = None
        if self.client_cert and self.client_key:
            if Path(self.client_cert).is_file() and Path(self.client_key).is_file():
                certfile, keyfile = self.client_cert, self.client_key
            else:
                logger.warning(
                    "[MQTT] Client certificate not found (%s, %s), connecting without it",
                    self.client_cert,
                    self.client_key,
                )

        client.tls_set(ca_certs=ca_certs, certfile=certfile, keyfile=keyfile)

    def connect(self) -> bool:
        """Conecta al broker MQTT y arranca el loop de red."""
        try:
            self._client = self._build_client()

            logger.info(
                "[MQTT] Connecting to %s:%d tls=%s",
                self.broker_host,
                self.broker_port,
                self.use_tls,
            )
            self._client.connect(self.broker_host, self.broker_port, keepalive=60)
            self._client.loop_start()

            # Esperar conexión
            for _ in range(self.CONNECT_WAIT_STEPS):
                if self._connected:
                    return True
                time.sleep(self.CONNECT_WAIT_STEP)

            logger.error("[MQTT] Connection timeout")
            return False

        except Exception as e:
            logger.exception("[MQTT] Connection failed: %s", e)
            return False

    def disconnect(self):
        """Desconecta del broker."""
        if self._client:
            try:
                self._client.loop_stop()
                self._client.disconnect()
            except Exception as e:
                logger.warning("[MQTT] Disconnect error: %s", e)
        self._connected = False

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de conexión."""
        if reason_code == 0:
            self._connected = True
            logger.info("[MQTT] Connected to broker")
            # Se resuscribe en cada (re)conexión.
            client.subscribe(self.subscription, qos=0)
            logger.info("[MQTT] Subscribed to %s", self.subscription)
        else:
            self._connected = False
            logger.error("[MQTT] Connection failed: rc=%s", reason_code)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de desconexión."""
        if self._connected:
            self._reconnect_count += 1
        self._connected = False
        logger.warning("[MQTT] Disconnected (rc=%s)", reason_code)

    def _on_message(self, client, userdata, msg):
        """Callback de mensaje - delega al handler."""
        if self._message_handler:
            self._message_handler(msg.topic, msg.payload)

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def reconnect_count(self) -> int:
        return self._reconnect_count
