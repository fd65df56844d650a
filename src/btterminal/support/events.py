class EventSource(object):
    """
    Publishes events to subscribed handlers. Handlers are callables taking the event;
    they are subscribed with += and unsubscribed with -=.
    """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def __len__(self):
        return len(self._handlers)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def remove(self, handler):
        """ Unsubscribes the handler. Unknown handlers are ignored. """
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def handlers(self):
        return tuple(self._handlers)

    def fire(self, event):
        # handlers may unsubscribe while the event is delivered
        for handler in self.handlers():
            handler(event)
